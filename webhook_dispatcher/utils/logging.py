import json
import logging
from datetime import datetime, timezone
from uuid import UUID

# Configure logger
logger = logging.getLogger("webhook_dispatcher")
logger.setLevel(logging.INFO)

# Handler
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def configure_logging(level: str = "INFO"):
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def log_delivery_attempt(event_type, subscription_id, target_url, status, status_code=None, error=None):
    """Log a webhook delivery attempt."""
    log_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": event_type,
        "subscription_id": str(subscription_id),
        "target_url": target_url,
        "status": status,
        "status_code": status_code,
    }

    if error:
        log_data["error"] = str(error)

    if status == "success":
        logger.info(f"Webhook delivered: {json.dumps(log_data)}")
    else:
        logger.warning(f"Webhook delivery failed: {json.dumps(log_data)}")


class WebhookLogger:
    """Helper class for webhook logging"""

    @staticmethod
    def subscription_registered(subscription_id: UUID, name: str, target_url: str):
        logger.info(f"Subscription registered: id={subscription_id}, name={name}, url={target_url}")

    @staticmethod
    def subscription_deleted(subscription_id: UUID):
        logger.info(f"Subscription deleted: id={subscription_id}")

    @staticmethod
    def event_triggered(event_type: str, target_count: int):
        logger.info(f"Event triggered: type={event_type}, targets={target_count}")

    @staticmethod
    def webhook_received(path: str, event_type):
        logger.info(f"Webhook received at {path}: event={event_type}")
