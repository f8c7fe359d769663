import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, JSON, String, Text, Uuid

from .database import Base


def utcnow():
    """Naive UTC timestamp, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    target_url = Column(String, nullable=False)
    event_types = Column(JSON, nullable=False, default=list)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)


class DeliveryLog(Base):
    __tablename__ = "delivery_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_type = Column(String, nullable=False, index=True)
    # No foreign key: log history outlives its subscription
    subscription_id = Column(Uuid, nullable=False, index=True)
    target_url = Column(String, nullable=False)
    payload = Column(JSON, nullable=True)
    status = Column(String, nullable=False)  # success, failed
    status_code = Column(Integer, nullable=True)
    response_body = Column(JSON, nullable=True)
    error = Column(Text, nullable=True)
    sent_at = Column(DateTime, nullable=False, default=utcnow, index=True)


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    status = Column(String, nullable=False, default="pending")  # pending, completed
    created_at = Column(DateTime, nullable=False, default=utcnow)
