from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..database import get_db
from ..exceptions import StorageError

router = APIRouter()


@router.get("/logs", response_model=List[schemas.DeliveryLog])
def list_logs(request: Request, limit: Optional[int] = Query(None, ge=1, le=1000), db: Session = Depends(get_db)):
    if limit is None:
        limit = request.app.state.settings.log_limit_default
    try:
        return crud.get_delivery_logs(db, limit=limit)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats", response_model=schemas.DeliveryStats)
def delivery_stats(db: Session = Depends(get_db)):
    try:
        return crud.get_delivery_stats(db)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
