from concurrent.futures import ThreadPoolExecutor, as_completed

import requests
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..exceptions import DeliveryFailure
from ..models import utcnow
from ..utils.logging import WebhookLogger, log_delivery_attempt
from .delivery import build_envelope, deliver_webhook

DEFAULT_TIMEOUT = 5.0  # seconds
MAX_ERROR_LENGTH = 500


class Dispatcher:
    """Fans an event out to every active subscription listening for it.

    Each target gets exactly one POST and exactly one delivery log entry,
    whatever the outcome. With ``max_workers > 1`` the POSTs run on a thread
    pool; the database session is still only used from the calling thread.
    """

    def __init__(self, db: Session, http=None, timeout: float = DEFAULT_TIMEOUT, max_workers: int = 1):
        self.db = db
        # A session created here is ours to close; an injected one belongs to the caller
        self._owns_http = http is None
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout
        self.max_workers = max(1, max_workers)

    def close(self):
        if self._owns_http:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def trigger(self, event_type: str, payload) -> schemas.DispatchResult:
        # StorageError from the query propagates; nothing has been attempted yet
        targets = [
            schemas.Subscription.model_validate(s)
            for s in crud.get_active_subscriptions_for_event(self.db, event_type)
        ]
        WebhookLogger.event_triggered(event_type, len(targets))

        if self.max_workers > 1 and len(targets) > 1:
            outcomes = self._fan_out_concurrent(event_type, payload, targets)
        else:
            outcomes = []
            for target in targets:
                entry = self._attempt(event_type, payload, target)
                outcomes.append(self._record(event_type, payload, target, entry))

        return schemas.DispatchResult(
            event_type=event_type,
            targets_attempted=len(targets),
            outcomes=outcomes,
        )

    def _attempt(self, event_type, payload, target):
        """Send one envelope; returns the log entry for it. Never raises DeliveryFailure."""
        envelope = build_envelope(event_type, payload)
        sent_at = utcnow()
        try:
            status_code, response_body = deliver_webhook(
                self.http, target.target_url, envelope, self.timeout
            )
        except DeliveryFailure as e:
            return schemas.DeliveryLogCreate(
                event_type=event_type,
                subscription_id=target.id,
                target_url=target.target_url,
                payload=payload,
                status="failed",
                status_code=e.status_code,
                error=str(e)[:MAX_ERROR_LENGTH],
                sent_at=sent_at,
            )

        return schemas.DeliveryLogCreate(
            event_type=event_type,
            subscription_id=target.id,
            target_url=target.target_url,
            payload=payload,
            status="success",
            status_code=status_code,
            response_body=response_body,
            sent_at=sent_at,
        )

    def _record(self, event_type, payload, target, entry: schemas.DeliveryLogCreate) -> schemas.DeliveryOutcome:
        crud.create_delivery_log(self.db, entry)
        log_delivery_attempt(
            event_type=event_type,
            subscription_id=target.id,
            target_url=target.target_url,
            status=entry.status,
            status_code=entry.status_code,
            error=entry.error,
        )
        return schemas.DeliveryOutcome(
            subscription_id=target.id,
            target_url=target.target_url,
            status=entry.status,
            status_code=entry.status_code,
            error=entry.error,
        )

    def _fan_out_concurrent(self, event_type, payload, targets):
        outcomes = []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(targets))) as pool:
            futures = {
                pool.submit(self._attempt, event_type, payload, target): target
                for target in targets
            }
            # Log writes happen here, on the calling thread, as attempts finish
            for future in as_completed(futures):
                target = futures[future]
                outcomes.append(self._record(event_type, payload, target, future.result()))
        return outcomes
