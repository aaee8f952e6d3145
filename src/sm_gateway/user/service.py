"""User identity service: resolve an external identity to a local user, refresh tokens.

The core never authenticates anyone itself. The identity provider (Steam
OpenID) is fronted by a bridge that forwards a verified assertion; this
service upserts the matching local user and issues tokens.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.errors import AccountDisabledError, InternalError
from src.sm_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.sm_gateway.user.schemas import IdentityAssertion

logger = logging.getLogger(__name__)

# xmax = 0 only for a freshly inserted row; an ON CONFLICT update sets it
_UPSERT_USER_SQL = text("""
    INSERT INTO users (steam_id, username, avatar, profile_url)
    VALUES (:steam_id, :username, :avatar, :profile_url)
    ON CONFLICT (steam_id) DO UPDATE
        SET username = EXCLUDED.username,
            avatar = EXCLUDED.avatar,
            profile_url = EXCLUDED.profile_url
    RETURNING id, steam_id, username, avatar, is_active, (xmax = 0) AS inserted
""")


@dataclass
class ResolvedIdentity:
    """Local user row resolved from an identity assertion, plus issued tokens."""

    user_id: int
    steam_id: str
    username: str
    avatar: str
    created: bool
    access_token: str
    refresh_token: str


class UserService:
    """Stateless service: instantiate once, reuse across requests."""

    async def resolve_identity(
        self, assertion: IdentityAssertion, db: AsyncSession
    ) -> ResolvedIdentity:
        """Find-or-create the local user for a Steam identity and refresh its profile fields.

        The caller must wrap this in `async with db.begin()`.
        """
        result = await db.execute(
            _UPSERT_USER_SQL,
            {
                "steam_id": assertion.steam_id,
                "username": assertion.display_name,
                "avatar": assertion.avatar,
                "profile_url": assertion.profile_url,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("User upsert returned no rows")
        if not row.is_active:
            raise AccountDisabledError()

        if row.inserted:
            logger.info("New user %s registered for steam_id=%s", row.id, row.steam_id)

        user_id = str(row.id)
        return ResolvedIdentity(
            user_id=row.id,
            steam_id=row.steam_id,
            username=row.username,
            avatar=row.avatar,
            created=bool(row.inserted),
            access_token=create_access_token(user_id),
            refresh_token=create_refresh_token(user_id),
        )

    async def refresh(self, refresh_token: str) -> str:
        """Validate refresh token and return a new access token."""
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(str(payload["sub"]))
