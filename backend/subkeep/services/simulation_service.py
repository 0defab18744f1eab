"""
What-if simulations over a user's active subscriptions, plus a real
cancel action that can be undone for a short time.

Undo slots live in process memory only. Restarting the process drops any
pending undo; that is expected behaviour, not data loss.

Apply and undo do not roll back on partial failure: subscriptions already
cancelled (or restored) before a failing id stay that way, and the error
names the id that failed.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..errors import BadRequestError, ForbiddenError, InternalError, NotFoundError
from ..models import SubscriptionStatus
from ..schemas import AddSimulationRequest, SimulationResult
from .billing import (
    MONTHS_PER_YEAR,
    UNCATEGORIZED_COLOR,
    UNCATEGORIZED_ID,
    UNCATEGORIZED_NAME,
    monthly_equivalent,
    personal_monthly,
)
from .report_service import CategoryAccumulator
from .subscription_store import SubscriptionStore

logger = logging.getLogger(__name__)

CANCEL_ACTION = "cancel"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UndoEntry:
    """Subscriptions soft-deleted by the last apply, and when undo stops working."""
    subscription_ids: list[int]
    expires_at: datetime


class UndoStore:
    """One pending undo per user, guarded by a single lock."""

    def __init__(self):
        self._entries: dict[str, UndoEntry] = {}
        self._lock = threading.Lock()

    def put(self, user_id: str, subscription_ids: list[int], expires_at: datetime) -> None:
        """Record an undo slot, replacing any pending one for the user."""
        with self._lock:
            self._entries[user_id] = UndoEntry(list(subscription_ids), expires_at)

    def pop(self, user_id: str) -> UndoEntry | None:
        """Remove and return the user's slot, if any."""
        with self._lock:
            return self._entries.pop(user_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# Shared by every SimulationService in this process
_undo_store = UndoStore()


class SimulationService:
    def __init__(
        self,
        db: Session,
        undo_store: UndoStore | None = None,
        clock: Callable[[], datetime] = _utcnow,
        undo_ttl: timedelta | None = None,
    ):
        self.store = SubscriptionStore(db)
        self.undo_store = undo_store if undo_store is not None else _undo_store
        self.clock = clock
        if undo_ttl is None:
            undo_ttl = timedelta(seconds=get_settings().undo_ttl_seconds)
        self.undo_ttl = undo_ttl

    def _active(self, user_id: str):
        return (
            self.store.list_for_user(user_id, SubscriptionStatus.ACTIVE),
            self.store.share_map(user_id),
        )

    def simulate_cancel(self, user_id: str, subscription_ids: list[int]) -> SimulationResult:
        """Totals and breakdown as if the given active subscriptions were cancelled."""
        if not subscription_ids:
            raise BadRequestError("at least one subscription id is required")

        active, share_map = self._active(user_id)
        active_ids = {sub.id for sub in active}
        for subscription_id in subscription_ids:
            if subscription_id not in active_ids:
                raise NotFoundError(f"subscription not found: {subscription_id}")

        cancel_set = set(subscription_ids)
        current_total = 0
        simulated_total = 0
        groups = CategoryAccumulator()

        for sub in active:
            personal = personal_monthly(sub, share_map)
            current_total += personal
            if sub.id in cancel_set:
                continue
            simulated_total += personal
            groups.add_subscription(sub, personal)

        difference = current_total - simulated_total
        return SimulationResult(
            current_monthly_total=current_total,
            simulated_monthly_total=simulated_total,
            monthly_difference=difference,
            annual_difference=difference * MONTHS_PER_YEAR,
            category_breakdown=groups.breakdown(simulated_total),
        )

    def _virtual_category(self, user_id: str, category_id: str | None) -> tuple[str, str, str]:
        if not category_id:
            return UNCATEGORIZED_ID, UNCATEGORIZED_NAME, UNCATEGORIZED_COLOR

        try:
            category = self.store.get_category(user_id, int(category_id))
        except ValueError:
            category = None
        if category is not None:
            return category_id, category.name, category.color or UNCATEGORIZED_COLOR

        # Unknown category: show the raw id until the client resolves it
        return category_id, category_id, UNCATEGORIZED_COLOR

    def simulate_add(self, user_id: str, item: AddSimulationRequest) -> SimulationResult:
        """
        Totals and breakdown as if a new subscription were added.

        monthly_difference is current - simulated, so adding a cost gives a
        negative difference.
        """
        active, share_map = self._active(user_id)

        current_total = 0
        groups = CategoryAccumulator()
        for sub in active:
            personal = personal_monthly(sub, share_map)
            current_total += personal
            groups.add_subscription(sub, personal)

        virtual_monthly = monthly_equivalent(item.amount, item.billing_cycle)
        groups.add(*self._virtual_category(user_id, item.category_id), virtual_monthly)

        simulated_total = current_total + virtual_monthly
        difference = current_total - simulated_total
        return SimulationResult(
            current_monthly_total=current_total,
            simulated_monthly_total=simulated_total,
            monthly_difference=difference,
            annual_difference=difference * MONTHS_PER_YEAR,
            category_breakdown=groups.breakdown(simulated_total),
        )

    def apply(self, user_id: str, action: str, subscription_ids: list[int]) -> None:
        """Cancel (soft-delete) subscriptions for real, keeping an undo slot."""
        if action != CANCEL_ACTION:
            raise BadRequestError(f"unsupported action: {action}")
        if not subscription_ids:
            raise BadRequestError("at least one subscription id is required")

        for subscription_id in subscription_ids:
            sub = self.store.get(subscription_id)
            if sub is None:
                raise NotFoundError(f"subscription not found: {subscription_id}")
            if sub.user_id != user_id:
                raise ForbiddenError(f"no access to subscription: {subscription_id}")

        self.undo_store.put(user_id, subscription_ids, self.clock() + self.undo_ttl)

        for subscription_id in subscription_ids:
            try:
                self.store.soft_delete(subscription_id)
            except SQLAlchemyError as exc:
                logger.error("Failed to cancel subscription %s: %s", subscription_id, exc)
                raise InternalError(f"failed to cancel subscription: {subscription_id}") from exc

        logger.info(
            "Applied simulation for user %s: action=%s count=%d",
            user_id, action, len(subscription_ids),
        )

    def undo(self, user_id: str) -> list[int]:
        """Restore the subscriptions cancelled by the user's last apply."""
        entry = self.undo_store.pop(user_id)
        if entry is None:
            raise NotFoundError("nothing to undo")

        if self.clock() > entry.expires_at:
            logger.warning("Undo window expired for user %s", user_id)
            raise BadRequestError("undo window has expired")

        for subscription_id in entry.subscription_ids:
            try:
                self.store.restore(subscription_id)
            except SQLAlchemyError as exc:
                logger.error("Failed to restore subscription %s: %s", subscription_id, exc)
                raise InternalError(f"failed to restore subscription: {subscription_id}") from exc

        logger.info(
            "Undid simulation for user %s: count=%d",
            user_id, len(entry.subscription_ids),
        )
        return entry.subscription_ids
