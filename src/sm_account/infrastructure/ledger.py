"""Append-only writer for the transactions ledger.

Called from account and settlement code inside the caller's transaction.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.domain.models import Transaction
from src.sm_common.enums import TransactionStatus
from src.sm_common.errors import InternalError

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO transactions
        (user_id, type, amount, balance_after, description, listing_id, status)
    VALUES
        (:user_id, :type, :amount, :balance_after, :description, :listing_id, :status)
    RETURNING id, user_id, type, amount, balance_after, description,
              listing_id, status, created_at
""")


def row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        listing_id=row.listing_id,  # type: ignore[attr-defined]
        listing_name=getattr(row, "listing_name", None),
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


async def write_transaction(
    db: AsyncSession,
    user_id: int,
    tx_type: str,
    amount: int,
    balance_after: int,
    description: str,
    listing_id: int | None = None,
) -> Transaction:
    """Insert one completed row into transactions and return it."""
    result = await db.execute(
        _INSERT_TRANSACTION_SQL,
        {
            "user_id": user_id,
            "type": tx_type,
            "amount": amount,
            "balance_after": balance_after,
            "description": description,
            "listing_id": listing_id,
            "status": TransactionStatus.COMPLETED.value,
        },
    )
    row = result.fetchone()
    if row is None:
        raise InternalError("Transaction insert returned no rows")
    return row_to_transaction(row)
