from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel


class SubscriptionCreate(BaseModel):
    # Left optional so that missing fields surface as ValidationError from crud
    name: Optional[str] = None
    target_url: Optional[str] = None
    event_types: Optional[List[str]] = None


class Subscription(BaseModel):
    id: UUID
    name: str
    target_url: str
    event_types: List[str]
    active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class SubscriptionDeleted(BaseModel):
    message: str
    webhook: Subscription


class DeliveryLogCreate(BaseModel):
    event_type: str
    subscription_id: UUID
    target_url: str
    payload: Any = None
    status: str
    status_code: Optional[int] = None
    response_body: Any = None
    error: Optional[str] = None
    sent_at: datetime


class DeliveryLog(DeliveryLogCreate):
    id: UUID

    class Config:
        from_attributes = True


class EventTrigger(BaseModel):
    event_type: str
    payload: Any = None


class DeliveryOutcome(BaseModel):
    subscription_id: UUID
    target_url: str
    status: str
    status_code: Optional[int] = None
    error: Optional[str] = None


class DispatchResult(BaseModel):
    event_type: str
    targets_attempted: int
    outcomes: List[DeliveryOutcome] = []


class TriggerResponse(DispatchResult):
    message: str


class DeliveryStats(BaseModel):
    total_webhooks: int
    total_logs: int
    successful_deliveries: int
    failed_deliveries: int
    total_users: int
    total_orders: int


class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class User(BaseModel):
    id: UUID
    name: str
    email: str
    created_at: datetime

    class Config:
        from_attributes = True


class OrderCreate(BaseModel):
    user_id: Optional[UUID] = None
    amount: Optional[float] = None


class Order(BaseModel):
    id: UUID
    user_id: UUID
    amount: float
    status: str
    created_at: datetime

    class Config:
        from_attributes = True
