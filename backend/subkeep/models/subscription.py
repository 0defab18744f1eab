import enum
from datetime import date, datetime
from sqlalchemy import String, Integer, Date, DateTime, ForeignKey, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class BillingCycle(enum.Enum):
    """How often a subscription bills."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class SubscriptionStatus(enum.Enum):
    """Lifecycle state of a subscription."""
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class Subscription(Base, TimestampMixin):
    """
    A recurring payment obligation owned by a single user.

    Amounts are stored as integers in the smallest currency unit.
    billing_cycle and status are plain strings so that rows written by older
    clients with unknown values still load; the billing helpers fall back to
    monthly semantics for anything they do not recognise.

    next_billing_date is the anchor date the calendar projects from.
    Rows with deleted_at set are soft-deleted and hidden from every query.
    """

    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    service_name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Category assignment
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Billing
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    billing_cycle: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BillingCycle.MONTHLY.value
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="KRW")
    next_billing_date: Mapped[date] = mapped_column(Date, nullable=False)
    auto_renew: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubscriptionStatus.ACTIVE.value, index=True
    )
    satisfaction_score: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 1-5
    start_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Soft delete marker
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)

    # Relationships
    category: Mapped["Category | None"] = relationship(
        "Category", back_populates="subscriptions"
    )
    share: Mapped["SubscriptionShare | None"] = relationship(
        "SubscriptionShare", back_populates="subscription", uselist=False
    )

    @property
    def monthly_amount(self) -> int:
        """Monthly-equivalent cost of this subscription."""
        from ..services.billing import monthly_equivalent
        return monthly_equivalent(self.amount, self.billing_cycle)

    @property
    def annual_amount(self) -> int:
        """Annual-equivalent cost of this subscription."""
        from ..services.billing import annual_equivalent
        return annual_equivalent(self.amount, self.billing_cycle)

    def __repr__(self) -> str:
        return (
            f"<Subscription(id={self.id}, service_name='{self.service_name}', "
            f"billing_cycle={self.billing_cycle})>"
        )
