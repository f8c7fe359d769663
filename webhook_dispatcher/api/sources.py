from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import events, schemas
from ..database import get_db
from ..exceptions import NotFoundError, StorageError, ValidationError
from ..worker.dispatcher import Dispatcher
from .dependencies import get_dispatcher

router = APIRouter()


@router.post("/users", response_model=schemas.User, status_code=201)
def create_user(user: schemas.UserCreate, db: Session = Depends(get_db),
                dispatcher: Dispatcher = Depends(get_dispatcher)):
    try:
        return events.create_user(db, dispatcher, user)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/orders", response_model=schemas.Order, status_code=201)
def create_order(order: schemas.OrderCreate, db: Session = Depends(get_db),
                 dispatcher: Dispatcher = Depends(get_dispatcher)):
    try:
        return events.create_order(db, dispatcher, order)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/orders/{order_id}/complete", response_model=schemas.Order)
def complete_order(order_id: UUID, db: Session = Depends(get_db),
                   dispatcher: Dispatcher = Depends(get_dispatcher)):
    try:
        return events.complete_order(db, dispatcher, order_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
