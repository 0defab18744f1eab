from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from subkeep.models import Base, Category, ShareGroup, Subscription, SubscriptionShare


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def add_category(db):
    def _add(name, user_id="user-1", color=None):
        category = Category(user_id=user_id, name=name, color=color)
        db.add(category)
        db.commit()
        return category
    return _add


@pytest.fixture
def add_subscription(db):
    def _add(service_name="Netflix", **overrides):
        fields = {
            "user_id": "user-1",
            "amount": 10000,
            "billing_cycle": "monthly",
            "next_billing_date": date(2026, 10, 20),
            "status": "active",
            "start_date": date(2025, 1, 1),
        }
        fields.update(overrides)
        sub = Subscription(service_name=service_name, **fields)
        db.add(sub)
        db.commit()
        return sub
    return _add


@pytest.fixture
def add_share(db):
    def _add(subscription, split_type, members=2, amount=None, ratio=None):
        group = ShareGroup(owner_id=subscription.user_id, name="Family")
        db.add(group)
        db.flush()
        share = SubscriptionShare(
            subscription_id=subscription.id,
            share_group_id=group.id,
            split_type=split_type,
            my_share_amount=amount,
            my_share_ratio=ratio,
            total_members_snapshot=members,
        )
        db.add(share)
        db.commit()
        return share
    return _add
