# tests/fakes.py

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from tarefas.errors import IdentityProviderError
from tarefas.routers.auth import create_session_token
from tarefas.schemas.user import Identity


class FakeIdentityProvider:
    """
    Stand-in for the Google provider.

    - Any code maps to ``identity``
    - The code "bad" fails like an unreachable provider
    """

    name = "google"

    def __init__(self, identity: Identity) -> None:
        self.identity = identity
        self.codes: list[str | None] = []
        self.redirect_uris: list[str] = []

    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        self.redirect_uris.append(redirect_uri)
        return RedirectResponse("https://provider.test/authorize", status_code=302)

    async def fetch_identity(self, request: Request) -> Identity:
        code = request.query_params.get("code")
        self.codes.append(code)
        if code == "bad":
            raise IdentityProviderError("provider unreachable")
        return self.identity


def auth_headers(identity: Identity) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_session_token(identity)}"}
