"""Example event sources.

Each operation persists its entity first and then triggers exactly one event,
waiting for the fan-out to finish before returning.
"""
from uuid import UUID

from sqlalchemy.orm import Session

from . import crud, schemas
from .worker.dispatcher import Dispatcher

USER_CREATED = "user.created"
ORDER_CREATED = "order.created"
ORDER_COMPLETED = "order.completed"


def _order_payload(order) -> dict:
    return {
        "orderId": str(order.id),
        "userId": str(order.user_id),
        "amount": order.amount,
        "status": order.status,
    }


def create_user(db: Session, dispatcher: Dispatcher, user: schemas.UserCreate):
    db_user = crud.create_user(db, user)
    dispatcher.trigger(USER_CREATED, {
        "userId": str(db_user.id),
        "name": db_user.name,
        "email": db_user.email,
    })
    return db_user


def create_order(db: Session, dispatcher: Dispatcher, order: schemas.OrderCreate):
    db_order = crud.create_order(db, order)
    dispatcher.trigger(ORDER_CREATED, _order_payload(db_order))
    return db_order


def complete_order(db: Session, dispatcher: Dispatcher, order_id: UUID):
    db_order = crud.complete_order(db, order_id)
    dispatcher.trigger(ORDER_COMPLETED, _order_payload(db_order))
    return db_order
