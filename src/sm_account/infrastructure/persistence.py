"""AccountRepository: concrete implementation of AccountRepositoryProtocol.

Balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A result of 0 rows means the user is missing or a business constraint was
violated (insufficient funds).

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.domain.models import ProfileStats, Transaction, UserAccount
from src.sm_account.infrastructure.ledger import row_to_transaction, write_transaction
from src.sm_common.cents import cents_to_display
from src.sm_common.enums import TransactionType
from src.sm_common.errors import InsufficientBalanceError, UserNotFoundError

_USER_COLUMNS = """
    id, steam_id, username, avatar, profile_url,
    balance, total_sales, total_purchases, created_at
"""

_GET_USER_SQL = text(f"""
    SELECT {_USER_COLUMNS}
    FROM users
    WHERE id = :user_id
""")

_DEPOSIT_SQL = text(f"""
    UPDATE users
    SET balance = balance + :amount
    WHERE id = :user_id
    RETURNING {_USER_COLUMNS}
""")

_WITHDRAW_SQL = text(f"""
    UPDATE users
    SET balance = balance - :amount
    WHERE id = :user_id AND balance >= :amount
    RETURNING {_USER_COLUMNS}
""")

_PROFILE_STATS_SQL = text("""
    SELECT
        COUNT(*) FILTER (WHERE status = 'listed') AS active_listings,
        COUNT(*) FILTER (WHERE status = 'sold')   AS total_sold
    FROM listings
    WHERE seller_id = :user_id
""")

_LIST_TRANSACTIONS_SQL = text("""
    SELECT t.id, t.user_id, t.type, t.amount, t.balance_after, t.description,
           t.listing_id, t.status, t.created_at, l.name AS listing_name
    FROM transactions t
    LEFT JOIN listings l ON l.id = t.listing_id
    WHERE t.user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR t.id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:tx_type AS TEXT) IS NULL OR t.type = CAST(:tx_type AS TEXT))
    ORDER BY t.id DESC
    LIMIT :limit
""")


def _row_to_user(row: object) -> UserAccount:
    return UserAccount(
        id=row.id,  # type: ignore[attr-defined]
        steam_id=row.steam_id,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        avatar=row.avatar,  # type: ignore[attr-defined]
        profile_url=row.profile_url,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        total_sales=row.total_sales,  # type: ignore[attr-defined]
        total_purchases=row.total_purchases,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class AccountRepository:
    """Concrete repository: all operations atomic at the SQL level."""

    async def get_user(self, db: AsyncSession, user_id: int) -> UserAccount | None:
        result = await db.execute(_GET_USER_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_user(row) if row else None

    async def get_profile_stats(self, db: AsyncSession, user_id: int) -> ProfileStats:
        row = (await db.execute(_PROFILE_STATS_SQL, {"user_id": user_id})).fetchone()
        if row is None:
            return ProfileStats(active_listings=0, total_sold=0)
        return ProfileStats(
            active_listings=row.active_listings or 0,
            total_sold=row.total_sold or 0,
        )

    async def deposit(
        self, db: AsyncSession, user_id: int, amount: int
    ) -> tuple[UserAccount, Transaction]:
        result = await db.execute(_DEPOSIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise UserNotFoundError(user_id)
        user = _row_to_user(row)
        entry = await write_transaction(
            db,
            user_id=user_id,
            tx_type=TransactionType.DEPOSIT.value,
            amount=amount,
            balance_after=user.balance,
            description=f"Deposit of {cents_to_display(amount)}",
        )
        return user, entry

    async def withdraw(
        self, db: AsyncSession, user_id: int, amount: int
    ) -> tuple[UserAccount, Transaction]:
        result = await db.execute(_WITHDRAW_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            current = await self.get_user(db, user_id)
            if current is None:
                raise UserNotFoundError(user_id)
            raise InsufficientBalanceError(amount, current.balance)
        user = _row_to_user(row)
        entry = await write_transaction(
            db,
            user_id=user_id,
            tx_type=TransactionType.WITHDRAWAL.value,
            amount=amount,
            balance_after=user.balance,
            description=f"Withdrawal of {cents_to_display(amount)}",
        )
        return user, entry

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: int,
        cursor_id: int | None,
        limit: int,
        tx_type: str | None,
    ) -> list[Transaction]:
        result = await db.execute(
            _LIST_TRANSACTIONS_SQL,
            {
                "user_id": user_id,
                "cursor_id": cursor_id,
                "tx_type": tx_type,
                "limit": limit,
            },
        )
        return [row_to_transaction(row) for row in result.fetchall()]
