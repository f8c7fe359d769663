import threading
from datetime import datetime, timezone

from ..exceptions import DeliveryFailure

USER_AGENT = "WebhookDispatcher/1.0"


def iso_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2024-05-01T12:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_envelope(event_type: str, payload) -> dict:
    return {
        "eventType": event_type,
        "data": payload,
        "timestamp": iso_timestamp(),
    }


def read_response_body(response):
    """JSON-decoded body when possible, raw text otherwise, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class _Attempt:
    """One POST run on a daemon thread so the caller can stop waiting at a deadline."""

    def __init__(self, http, target_url: str, envelope: dict, timeout: float):
        self.http = http
        self.target_url = target_url
        self.envelope = envelope
        self.timeout = timeout
        self.response = None
        self.body = None
        self.error = None
        self.thread = threading.Thread(target=self.run, daemon=True)

    def run(self):
        try:
            self.response = self.http.post(
                self.target_url,
                json=self.envelope,
                headers={
                    "Content-Type": "application/json",
                    "User-Agent": USER_AGENT,
                },
                timeout=self.timeout,
                stream=True,
            )
            # Body is read here too, so a slow body counts against the deadline
            self.body = read_response_body(self.response)
        except Exception as e:
            self.error = e

    def abandon(self):
        # Closing the connection unblocks a reader stuck on a trickling body
        if self.response is not None:
            self.response.close()


def deliver_webhook(http, target_url: str, envelope: dict, timeout: float):
    """POST one envelope to one subscriber.

    The whole attempt (connect, headers and body) must finish within
    ``timeout`` seconds. Returns ``(status_code, response_body)`` for any HTTP
    response, whatever its status. Raises DeliveryFailure when no complete
    response was obtained in time.
    """
    attempt = _Attempt(http, target_url, envelope, timeout)
    attempt.thread.start()
    attempt.thread.join(timeout)

    if attempt.thread.is_alive():
        attempt.abandon()
        raise DeliveryFailure(f"Delivery timed out after {timeout:g}s")

    e = attempt.error
    if e is not None:
        # Any error here belongs to this target alone: requests errors, and also
        # urllib3 errors it leaves unwrapped such as LocationParseError for an
        # empty or over-long host label
        status_code = getattr(getattr(e, "response", None), "status_code", None)
        raise DeliveryFailure(str(e) or e.__class__.__name__, status_code=status_code) from e

    return attempt.response.status_code, attempt.body
