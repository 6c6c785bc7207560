"""Google sign-in through Authlib's Starlette OAuth client."""

import logging

import httpx
from authlib.integrations.base_client import MismatchingStateError, OAuthError
from authlib.integrations.starlette_client import OAuth
from starlette.requests import Request
from starlette.responses import Response

from .config import GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET
from .errors import IdentityProviderError
from .schemas.user import Identity

logger = logging.getLogger(__name__)

GOOGLE_METADATA_URL = "https://accounts.google.com/.well-known/openid-configuration"

oauth = OAuth()
oauth.register(
    name="google",
    client_id=GOOGLE_CLIENT_ID,
    client_secret=GOOGLE_CLIENT_SECRET,
    server_metadata_url=GOOGLE_METADATA_URL,
    client_kwargs={"scope": "openid email profile"},
)


class OAuthIdentityProvider:
    """Sign-in against one registered Authlib client.

    Authlib keeps the ``state`` and ``nonce`` in the Starlette session
    between the redirect and the callback.
    """

    def __init__(self, client):
        self.client = client
        self.name = client.name

    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        try:
            return await self.client.authorize_redirect(request, redirect_uri)
        except (OAuthError, httpx.HTTPError) as exc:
            logger.error("Could not start %s sign-in: %s", self.name, exc)
            raise IdentityProviderError("Identity provider request failed") from exc

    async def fetch_identity(self, request: Request) -> Identity:
        """Exchange the callback's code and read the user's profile.

        A callback whose ``state`` does not match the session raises
        ``MismatchingStateError`` unchanged.
        """
        try:
            token = await self.client.authorize_access_token(request)
            info = token.get("userinfo") or await self.client.userinfo(token=token)
        except MismatchingStateError:
            raise
        except (OAuthError, httpx.HTTPError) as exc:
            logger.error("%s sign-in failed: %s", self.name, exc)
            raise IdentityProviderError("Identity provider request failed") from exc

        email = info.get("email")
        if not email:
            raise IdentityProviderError("Email not returned from the identity provider")

        return Identity(name=info.get("name"), email=email, image=info.get("picture"))


def get_identity_provider() -> OAuthIdentityProvider:
    """Dependency returning the configured provider."""
    return OAuthIdentityProvider(oauth.create_client("google"))
