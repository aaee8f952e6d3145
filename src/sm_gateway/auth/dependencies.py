"""FastAPI dependencies: get_current_user, require_admin, require_identity_bridge.

Usage in any protected router:
    from src.sm_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: UserModel = Depends(get_current_user)):
        ...
"""

import hmac

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sm_common.database import get_db_session
from src.sm_common.errors import (
    AccountDisabledError,
    AdminRequiredError,
    InvalidCredentialsError,
    InvalidIdentityBridgeKeyError,
)
from src.sm_gateway.auth.jwt_handler import decode_token
from src.sm_gateway.user.db_models import UserModel

# Tokens come from /auth/identity; the OAuth2 scheme only extracts the Bearer header
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/identity")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Extract and validate the JWT Bearer token, return the UserModel.

    Raises HTTP 401 if the token is missing, invalid, expired, or names an unknown user.
    Raises HTTP 403 (AccountDisabledError) if the user account is disabled.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    sub = payload.get("sub")
    if not sub or not str(sub).isdigit():
        raise _CREDENTIALS_EXCEPTION

    result = await db.execute(select(UserModel).where(UserModel.id == int(sub)))
    user = result.scalar_one_or_none()
    if user is None:
        raise _CREDENTIALS_EXCEPTION

    if not user.is_active:
        raise AccountDisabledError()

    return user


async def require_admin(
    current_user: UserModel = Depends(get_current_user),
) -> UserModel:
    """Allow only users whose steam_id is listed in ADMIN_STEAM_IDS."""
    if current_user.steam_id not in settings.ADMIN_STEAM_IDS:
        raise AdminRequiredError()
    return current_user


async def require_identity_bridge(
    x_identity_bridge_key: str | None = Header(default=None),
) -> None:
    """Authenticate the identity-provider bridge by its shared secret."""
    if x_identity_bridge_key is None or not hmac.compare_digest(
        x_identity_bridge_key, settings.IDENTITY_BRIDGE_SECRET
    ):
        raise InvalidIdentityBridgeKeyError()
