"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.domain.models import ProfileStats, Transaction, UserAccount


class AccountRepositoryProtocol(Protocol):
    async def get_user(self, db: AsyncSession, user_id: int) -> UserAccount | None: ...

    async def get_profile_stats(self, db: AsyncSession, user_id: int) -> ProfileStats: ...

    async def deposit(
        self, db: AsyncSession, user_id: int, amount: int
    ) -> tuple[UserAccount, Transaction]: ...

    async def withdraw(
        self, db: AsyncSession, user_id: int, amount: int
    ) -> tuple[UserAccount, Transaction]: ...

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: int,
        cursor_id: int | None,
        limit: int,
        tx_type: str | None,
    ) -> list[Transaction]: ...
