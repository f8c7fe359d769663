from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..database import get_db
from ..exceptions import NotFoundError, StorageError, ValidationError
from ..utils.logging import WebhookLogger

router = APIRouter()


@router.post("/register", response_model=schemas.Subscription, status_code=201)
def register_subscription(subscription: schemas.SubscriptionCreate, db: Session = Depends(get_db)):
    try:
        db_subscription = crud.create_subscription(db=db, subscription=subscription)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    WebhookLogger.subscription_registered(db_subscription.id, db_subscription.name, db_subscription.target_url)
    return db_subscription


@router.get("", response_model=List[schemas.Subscription])
def list_subscriptions(db: Session = Depends(get_db)):
    try:
        return crud.get_subscriptions(db)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{subscription_id}", response_model=schemas.Subscription)
def read_subscription(subscription_id: UUID, db: Session = Depends(get_db)):
    try:
        return crud.get_subscription(db, subscription_id=subscription_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Webhook not found")
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{subscription_id}", response_model=schemas.SubscriptionDeleted)
def delete_subscription(subscription_id: UUID, db: Session = Depends(get_db)):
    try:
        deleted = crud.delete_subscription(db, subscription_id=subscription_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Webhook not found")
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    WebhookLogger.subscription_deleted(subscription_id)
    return {"message": "Webhook deleted", "webhook": deleted}


@router.get("/{subscription_id}/logs", response_model=List[schemas.DeliveryLog])
def read_subscription_logs(subscription_id: UUID, db: Session = Depends(get_db)):
    # History stays readable after the subscription itself is deleted
    try:
        return crud.get_subscription_logs(db, subscription_id=subscription_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
