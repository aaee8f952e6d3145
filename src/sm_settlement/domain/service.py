"""SettlementEngine: converts a buyer's cart into completed purchases atomically.

One checkout is one database transaction:
  1. read cart lines (listing price, seller, status), ordered by listing id
  2. availability check; any line not listed aborts with the unavailable subset
  3. total = sum of prices in integer cents
  4. lock buyer and seller rows FOR UPDATE in ascending id order, then the
     listing rows; re-run the availability check on the locked statuses and
     check the balance
  5. per line: listed -> sold (conditional), debit buyer, credit seller,
     purchase + sale ledger rows
  6. clear the buyer's cart
  7. verify ledger pairs, commit
Any failure rolls back everything and surfaces as one error: storage
contention as SettlementRetryableError, business rejections as their own
InvalidOperation-class AppError, and any other fault as CheckoutFailedError.
"""

import logging

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sm_account.infrastructure.ledger import write_transaction
from src.sm_common.cents import cents_to_display, sum_cents
from src.sm_common.enums import TransactionType
from src.sm_common.errors import (
    AppError,
    CheckoutFailedError,
    EmptyCartError,
    InsufficientBalanceError,
    InternalError,
    InvalidOperationError,
    ItemsUnavailableError,
    SettlementRetryableError,
    TransientError,
)
from src.sm_settlement.domain.availability import check_availability, with_current_status
from src.sm_settlement.domain.invariants import verify_settlement_pairs
from src.sm_settlement.domain.models import AvailabilityResult, CartLine, SettlementResult
from src.sm_settlement.domain.repository import SettlementRepositoryProtocol
from src.sm_settlement.infrastructure.persistence import SettlementRepository

logger = logging.getLogger(__name__)

# deadlock_detected, serialization_failure, lock_not_available, query_canceled
_RETRYABLE_SQLSTATES = frozenset({"40P01", "40001", "55P03", "57014"})


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is None and orig is not None:
        code = getattr(orig.__cause__, "sqlstate", None)
    return code


def is_retryable(exc: DBAPIError) -> bool:
    """True for lock contention and lost connections, false for data errors."""
    if exc.connection_invalidated:
        return True
    code = _sqlstate(exc)
    if code is None:
        return isinstance(exc, OperationalError)
    # class 08 is connection exceptions
    return code in _RETRYABLE_SQLSTATES or code.startswith("08")


class SettlementEngine:
    def __init__(
        self,
        repo: SettlementRepositoryProtocol | None = None,
        lock_timeout_ms: int | None = None,
    ) -> None:
        self._repo: SettlementRepositoryProtocol = repo or SettlementRepository()
        self._lock_timeout_ms = (
            lock_timeout_ms if lock_timeout_ms is not None else settings.SETTLEMENT_LOCK_TIMEOUT_MS
        )

    async def settle_cart(self, buyer_id: int, db: AsyncSession) -> SettlementResult:
        """Main entry point. Commits on success, rolls back on any failure."""
        try:
            result = await self._settle_inner(buyer_id, db)
            await db.commit()
        except (InvalidOperationError, TransientError) as exc:
            await db.rollback()
            logger.warning(
                "Checkout rejected buyer=%s code=%d: %s", buyer_id, exc.code, exc.message
            )
            raise
        except AppError as exc:
            await db.rollback()
            logger.error(
                "Checkout aborted buyer=%s code=%d: %s", buyer_id, exc.code, exc.message
            )
            raise CheckoutFailedError(type(exc).__name__) from exc
        except DBAPIError as exc:
            await db.rollback()
            if is_retryable(exc):
                logger.warning(
                    "Checkout rolled back buyer=%s sqlstate=%s", buyer_id, _sqlstate(exc)
                )
                raise SettlementRetryableError(type(exc.orig).__name__) from exc
            logger.exception("Checkout failed buyer=%s sqlstate=%s", buyer_id, _sqlstate(exc))
            raise CheckoutFailedError(type(exc).__name__) from exc
        except Exception as exc:
            await db.rollback()
            logger.exception("Checkout failed buyer=%s", buyer_id)
            raise CheckoutFailedError(type(exc).__name__) from exc

        logger.info(
            "Checkout completed buyer=%s items=%d total=%d balance_after=%d",
            buyer_id, result.item_count, result.total_cents, result.balance_after,
        )
        return result

    async def _settle_inner(self, buyer_id: int, db: AsyncSession) -> SettlementResult:
        await self._repo.set_lock_timeout(db, self._lock_timeout_ms)

        # Step 1: cart lines
        lines = await self._repo.read_cart_lines(db, buyer_id)
        if not lines:
            raise EmptyCartError()

        # Step 2: availability
        availability = check_availability(lines)
        if not availability.all_available:
            raise ItemsUnavailableError(availability.report())

        # Step 3: total
        total = sum_cents([line.price for line in lines])

        # Step 4: lock participants and listings, re-check availability, check balance
        participants = [buyer_id] + [line.seller_id for line in lines]
        balances = await self._repo.lock_balances(db, participants)
        lines = await self._relock_lines(db, lines)
        availability = check_availability(lines)
        if not availability.all_available:
            raise ItemsUnavailableError(availability.report())
        if buyer_id not in balances:
            raise InternalError(f"Buyer {buyer_id} row missing at checkout")
        if balances[buyer_id] < total:
            raise InsufficientBalanceError(total, balances[buyer_id])

        # Step 5: transfer, item by item in listing id order
        buyer_balance = balances[buyer_id]
        for index, line in enumerate(lines):
            if not await self._repo.mark_sold(db, line.listing_id):
                raise ItemsUnavailableError(await self._lost_lines(db, lines[index:]))

            buyer_balance = await self._repo.debit_buyer(db, buyer_id, line.price)
            seller_balance = await self._repo.credit_seller(db, line.seller_id, line.price)
            price_text = cents_to_display(line.price)
            await write_transaction(
                db, buyer_id, TransactionType.PURCHASE.value, line.price, buyer_balance,
                f"Purchased {line.name} for {price_text}", line.listing_id,
            )
            await write_transaction(
                db, line.seller_id, TransactionType.SALE.value, line.price, seller_balance,
                f"Sold {line.name} for {price_text}", line.listing_id,
            )

        # Step 6: empty the cart
        await self._repo.clear_cart(db, buyer_id)

        # Step 7: ledger pairs
        await verify_settlement_pairs(lines, db)

        return SettlementResult(
            buyer_id=buyer_id,
            total_cents=total,
            item_count=len(lines),
            listing_ids=[line.listing_id for line in lines],
            balance_after=buyer_balance,
        )

    async def _relock_lines(self, db: AsyncSession, lines: list[CartLine]) -> list[CartLine]:
        statuses = await self._repo.lock_listing_statuses(
            db, [line.listing_id for line in lines]
        )
        return with_current_status(lines, statuses)

    async def _lost_lines(
        self, db: AsyncSession, remaining: list[CartLine]
    ) -> list[dict[str, object]]:
        """Report every not-yet-settled line that is no longer listed, not just the first."""
        lost = check_availability(await self._relock_lines(db, remaining)).unavailable
        return AvailabilityResult(unavailable=lost or remaining[:1]).report()
