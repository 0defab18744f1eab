import enum
from sqlalchemy import String, Integer, Float, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class SplitType(enum.Enum):
    """How a shared subscription's cost is divided."""
    EQUAL = "equal"
    FIXED_AMOUNT = "fixed_amount"
    FIXED_RATIO = "fixed_ratio"


class ShareGroup(Base, TimestampMixin):
    """A set of people sharing one or more subscriptions."""

    __tablename__ = "share_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<ShareGroup(id={self.id}, name='{self.name}')>"


class SubscriptionShare(Base, TimestampMixin):
    """
    Split policy linking a subscription to a share group.

    total_members_snapshot is captured when the link is made and is not
    recomputed when the group's membership later changes.
    """

    __tablename__ = "subscription_shares"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subscription_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("subscriptions.id", ondelete="CASCADE"),
        nullable=False, unique=True
    )
    share_group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("share_groups.id", ondelete="CASCADE"), nullable=False
    )
    split_type: Mapped[str] = mapped_column(String(20), nullable=False)
    my_share_amount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    my_share_ratio: Mapped[float | None] = mapped_column(Float, nullable=True)  # 0..1
    total_members_snapshot: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Relationships
    subscription: Mapped["Subscription"] = relationship(
        "Subscription", back_populates="share"
    )
    share_group: Mapped["ShareGroup"] = relationship("ShareGroup")

    def personal_amount(self, monthly_amount: int) -> int:
        """Portion of monthly_amount the current user pays under this policy."""
        from ..services.billing import personal_share
        return personal_share(self, monthly_amount)

    def __repr__(self) -> str:
        return (
            f"<SubscriptionShare(subscription={self.subscription_id}, "
            f"split_type={self.split_type})>"
        )
