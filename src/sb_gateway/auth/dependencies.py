"""FastAPI dependencies: get_current_identity, require_host.

Usage in any protected router:
    from src.sb_gateway.auth.dependencies import get_current_identity

    @router.get("/protected")
    async def protected(identity: str = Depends(get_current_identity)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.sb_account.domain.addressing import identity_bytes
from src.sb_common.errors import InvalidCredentialsError, InvalidIdentityError
from src.sb_gateway.auth.capabilities import assert_platform_host
from src.sb_gateway.auth.jwt_handler import decode_token

# Tokens are issued out of band; tokenUrl only feeds Swagger's "Authorize" button
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_identity(token: str = Depends(oauth2_scheme)) -> str:
    """Extract and validate the JWT Bearer token, return the caller's identity.

    Raises HTTP 401 if the token is missing, invalid, expired, or its subject
    is not a 32-byte base58 identity.
    """
    try:
        payload = decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    identity: str | None = payload.get("sub")
    if not identity:
        raise _CREDENTIALS_EXCEPTION
    try:
        identity_bytes(identity)
    except InvalidIdentityError:
        raise _CREDENTIALS_EXCEPTION from None
    return identity


async def require_host(identity: str = Depends(get_current_identity)) -> str:
    """Verify the caller is the platform host identity (403 otherwise)."""
    assert_platform_host(identity)
    return identity
