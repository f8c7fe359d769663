from contextlib import contextmanager
from typing import List, Optional
from uuid import UUID

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import desc

from . import models, schemas
from .exceptions import NotFoundError, StorageError, ValidationError

_http_url = TypeAdapter(HttpUrl)


@contextmanager
def storage_errors(db: Session, action: str):
    """Convert SQLAlchemy failures into StorageError, rolling back the session."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Could not {action}: {e}") from e


def _clean_event_types(event_types: Optional[List[str]]) -> List[str]:
    cleaned = []
    for event_type in event_types or []:
        if not isinstance(event_type, str):
            continue
        event_type = event_type.strip()
        if event_type and event_type not in cleaned:
            cleaned.append(event_type)
    return cleaned


# Subscription CRUD
def create_subscription(db: Session, subscription: schemas.SubscriptionCreate):
    name = (subscription.name or "").strip()
    target_url = (subscription.target_url or "").strip()
    event_types = _clean_event_types(subscription.event_types)

    if not name or not target_url or not event_types:
        raise ValidationError("Please provide name, target_url, and at least one event type")
    try:
        _http_url.validate_python(target_url)
    except SchemaValidationError:
        raise ValidationError(f"target_url must be an http(s) URL: {target_url}")

    db_subscription = models.Subscription(
        name=name,
        target_url=target_url,
        event_types=event_types,
        active=True,
    )
    with storage_errors(db, "register subscription"):
        db.add(db_subscription)
        db.commit()
        db.refresh(db_subscription)
    return db_subscription


def get_subscription(db: Session, subscription_id: UUID):
    with storage_errors(db, "load subscription"):
        db_subscription = db.query(models.Subscription).filter(
            models.Subscription.id == subscription_id
        ).first()
    if db_subscription is None:
        raise NotFoundError(f"Subscription {subscription_id} not found")
    return db_subscription


def get_subscriptions(db: Session):
    with storage_errors(db, "list subscriptions"):
        return db.query(models.Subscription).order_by(
            models.Subscription.created_at
        ).all()


def get_active_subscriptions_for_event(db: Session, event_type: str):
    """Active subscriptions listening to event_type, in creation order."""
    with storage_errors(db, "query subscriptions"):
        candidates = db.query(models.Subscription).filter(
            models.Subscription.active.is_(True)
        ).order_by(models.Subscription.created_at).all()
    # event_types is a JSON list; membership is checked here to stay backend-agnostic
    return [s for s in candidates if event_type in (s.event_types or [])]


def delete_subscription(db: Session, subscription_id: UUID) -> schemas.Subscription:
    db_subscription = get_subscription(db, subscription_id)
    # Snapshot before the row goes away
    deleted = schemas.Subscription.model_validate(db_subscription)
    with storage_errors(db, "delete subscription"):
        db.delete(db_subscription)
        db.commit()
    return deleted


# DeliveryLog CRUD
def create_delivery_log(db: Session, entry: schemas.DeliveryLogCreate):
    db_log = models.DeliveryLog(
        event_type=entry.event_type,
        subscription_id=entry.subscription_id,
        target_url=entry.target_url,
        payload=entry.payload,
        status=entry.status,
        status_code=entry.status_code,
        response_body=entry.response_body,
        error=entry.error,
        sent_at=entry.sent_at,
    )
    with storage_errors(db, "write delivery log"):
        db.add(db_log)
        db.commit()
        db.refresh(db_log)
    return db_log


def get_subscription_logs(db: Session, subscription_id: UUID):
    with storage_errors(db, "list delivery logs"):
        return db.query(models.DeliveryLog).filter(
            models.DeliveryLog.subscription_id == subscription_id
        ).order_by(desc(models.DeliveryLog.sent_at)).all()


def get_delivery_logs(db: Session, limit: int = 100):
    with storage_errors(db, "list delivery logs"):
        return db.query(models.DeliveryLog).order_by(
            desc(models.DeliveryLog.sent_at)
        ).limit(limit).all()


def get_delivery_stats(db: Session) -> schemas.DeliveryStats:
    with storage_errors(db, "compute delivery stats"):
        logs = db.query(models.DeliveryLog)
        return schemas.DeliveryStats(
            total_webhooks=db.query(models.Subscription).count(),
            total_logs=logs.count(),
            successful_deliveries=logs.filter(models.DeliveryLog.status == "success").count(),
            failed_deliveries=logs.filter(models.DeliveryLog.status == "failed").count(),
            total_users=db.query(models.User).count(),
            total_orders=db.query(models.Order).count(),
        )


# User / Order CRUD
def create_user(db: Session, user: schemas.UserCreate):
    name = (user.name or "").strip()
    email = (user.email or "").strip()
    if not name or not email:
        raise ValidationError("Name and email required")

    db_user = models.User(name=name, email=email)
    with storage_errors(db, "create user"):
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    return db_user


def create_order(db: Session, order: schemas.OrderCreate):
    if order.user_id is None or not order.amount or order.amount <= 0:
        raise ValidationError("user_id and a positive amount required")

    db_order = models.Order(user_id=order.user_id, amount=order.amount, status="pending")
    with storage_errors(db, "create order"):
        db.add(db_order)
        db.commit()
        db.refresh(db_order)
    return db_order


def complete_order(db: Session, order_id: UUID):
    with storage_errors(db, "load order"):
        db_order = db.query(models.Order).filter(models.Order.id == order_id).first()
    if db_order is None:
        raise NotFoundError(f"Order {order_id} not found")

    with storage_errors(db, "complete order"):
        db_order.status = "completed"
        db.commit()
        db.refresh(db_order)
    return db_order
