import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from authlib.integrations.base_client import MismatchingStateError
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from jose import JWTError, jwt

from ..config import PUBLIC_URL, SECRET_KEY, SESSION_EXPIRE_MINUTES
from ..identity import OAuthIdentityProvider, get_identity_provider
from ..schemas.user import Identity, SessionResponse, TokenData

logger = logging.getLogger(__name__)

router = APIRouter()

ALGORITHM = "HS256"
SESSION_COOKIE = "token"


def create_session_token(identity: Identity, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed session token carrying the identity snapshot."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=SESSION_EXPIRE_MINUTES)
    )
    to_encode = {
        "sub": identity.email,
        "name": identity.name,
        "image": identity.image,
        "exp": expire,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def _get_token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.cookies.get(SESSION_COOKIE)


def _decode_token(token: str) -> Optional[TokenData]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    email = payload.get("sub")
    if not email:
        return None
    return TokenData(name=payload.get("name"), email=email, image=payload.get("image"))


def read_session(request: Request) -> Optional[Identity]:
    """Identity of the signed-in user, or None when there is no valid session."""
    token = _get_token_from_request(request)
    if not token:
        return None

    token_data = _decode_token(token)
    if not token_data or not token_data.email:
        return None
    return Identity(name=token_data.name, email=token_data.email, image=token_data.image)


async def get_current_user(request: Request) -> Identity:
    """Session identity; 401 when the request is not signed in."""
    user = read_session(request)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_user(request: Request) -> Optional[Identity]:
    return read_session(request)


def _get_provider(
    provider: str,
    identity_provider: OAuthIdentityProvider = Depends(get_identity_provider),
) -> OAuthIdentityProvider:
    if provider != identity_provider.name:
        raise HTTPException(status_code=404, detail="Unknown identity provider")
    return identity_provider


def _secure_cookies() -> bool:
    return PUBLIC_URL.startswith("https://")


def _callback_url(request: Request, provider: str) -> str:
    if PUBLIC_URL:
        return f"{PUBLIC_URL}/api/auth/callback/{provider}"
    return str(request.url_for("callback", provider=provider))


@router.get("/signin/{provider}")
async def signin(
    request: Request,
    identity_provider: OAuthIdentityProvider = Depends(_get_provider),
):
    """Start the OAuth sign-in by redirecting to the provider."""
    return await identity_provider.authorize_redirect(
        request, _callback_url(request, identity_provider.name)
    )


@router.get("/callback/{provider}")
async def callback(
    request: Request,
    error: Optional[str] = None,
    identity_provider: OAuthIdentityProvider = Depends(_get_provider),
):
    """Finish the OAuth sign-in and issue the session cookie."""
    if error:
        logger.info("Sign-in cancelled by provider: %s", error)
        return RedirectResponse("/", status_code=status.HTTP_302_FOUND)

    try:
        identity = await identity_provider.fetch_identity(request)
    except MismatchingStateError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid sign-in state")
    logger.info("Signed in %s", identity.email)

    response = RedirectResponse("/dashboard", status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=create_session_token(identity),
        httponly=True,
        secure=_secure_cookies(),
        samesite="lax",
        max_age=SESSION_EXPIRE_MINUTES * 60,
    )
    return response


@router.post("/signout")
async def signout():
    """Sign out and clear session cookie."""
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(key=SESSION_COOKIE)
    return response


@router.get("/session", response_model=SessionResponse)
async def get_session(user: Optional[Identity] = Depends(get_optional_user)):
    """Get current session identity."""
    return {"user": user}
