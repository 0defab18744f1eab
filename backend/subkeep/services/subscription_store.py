from datetime import datetime, timezone
from sqlalchemy.orm import Session, joinedload

from ..models import Category, Subscription, SubscriptionShare, SubscriptionStatus

# Largest value SQLite can store in an INTEGER column
MAX_ID = 2**63 - 1


def is_storable_id(value: int) -> bool:
    return 1 <= value <= MAX_ID


class SubscriptionStore:
    """Database access for subscriptions, their categories and split policies."""

    def __init__(self, db: Session):
        self.db = db

    def list_for_user(
        self,
        user_id: str,
        status: SubscriptionStatus | None = None,
    ) -> list[Subscription]:
        """Non-deleted subscriptions for a user, optionally filtered by status."""
        query = (
            self.db.query(Subscription)
            .options(joinedload(Subscription.category))
            .filter(
                Subscription.user_id == user_id,
                Subscription.deleted_at.is_(None),
            )
        )
        if status is not None:
            query = query.filter(Subscription.status == status.value)
        return query.order_by(Subscription.id).all()

    def share_map(self, user_id: str) -> dict[int, SubscriptionShare]:
        """Split policies for the user's subscriptions, keyed by subscription id."""
        rows = (
            self.db.query(SubscriptionShare)
            .join(Subscription, SubscriptionShare.subscription_id == Subscription.id)
            .filter(Subscription.user_id == user_id)
            .all()
        )
        return {row.subscription_id: row for row in rows}

    def get(self, subscription_id: int) -> Subscription | None:
        if not is_storable_id(subscription_id):
            return None
        return self.db.query(Subscription).filter(
            Subscription.id == subscription_id,
            Subscription.deleted_at.is_(None),
        ).first()

    def get_category(self, user_id: str, category_id: int) -> Category | None:
        if not is_storable_id(category_id):
            return None
        return self.db.query(Category).filter(
            Category.id == category_id,
            Category.user_id == user_id,
        ).first()

    def soft_delete(self, subscription_id: int) -> None:
        """Mark a subscription deleted and commit immediately."""
        self.db.query(Subscription).filter(
            Subscription.id == subscription_id
        ).update({Subscription.deleted_at: datetime.now(timezone.utc)})
        self.db.commit()

    def restore(self, subscription_id: int) -> None:
        """Clear the soft-delete marker and commit immediately."""
        self.db.query(Subscription).filter(
            Subscription.id == subscription_id
        ).update({Subscription.deleted_at: None})
        self.db.commit()
