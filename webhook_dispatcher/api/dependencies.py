from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..worker.dispatcher import Dispatcher


def get_dispatcher(request: Request, db: Session = Depends(get_db)) -> Dispatcher:
    settings = request.app.state.settings
    return Dispatcher(
        db,
        http=request.app.state.http,
        timeout=settings.delivery_timeout,
        max_workers=settings.dispatch_max_workers,
    )
