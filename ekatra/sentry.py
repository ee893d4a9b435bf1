"""
Sentry initialization for centralized error tracking.
Observes transformations, never changes their outcome.
"""
import logging
from typing import Dict, Any

import sentry_sdk
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from ekatra.config import config
from ekatra.logger import logger


def initialize_sentry() -> bool:
    """Initialize Sentry SDK if DSN is configured."""
    if not config.has_sentry:
        logger.info("Sentry not configured, skipping initialization")
        return False

    try:
        sentry_sdk.init(
            dsn=config.SENTRY_DSN,
            environment=config.ENVIRONMENT,
            integrations=[
                AsyncioIntegration(),
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)
            ],
            traces_sample_rate=0.1,
            send_default_pii=False,
            before_send=_enrich_sentry_event
        )
    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False

    logger.info("Sentry initialized for error tracking")
    return True


def _enrich_sentry_event(event: Dict[str, Any], hint: Dict[str, Any]) -> Dict[str, Any]:
    """Tag events with the system name and group them by exception type."""
    event.setdefault("tags", {})
    event["tags"]["system"] = "ekatra-normalizer"
    event["tags"]["environment"] = config.ENVIRONMENT

    exceptions = (event.get("exception") or {}).get("values", [])
    if exceptions:
        exc = exceptions[0]
        event["fingerprint"] = [
            "{{ default }}",
            exc.get("type", "Unknown"),
            exc.get("module", "unknown")
        ]

    return event


def capture_transformation_error(raw_data: Any, error: Exception, route: str = "unknown"):
    """Report an unexpected transformation failure without the payload values."""
    if not config.has_sentry:
        return

    keys = sorted(str(key) for key in raw_data) if isinstance(raw_data, dict) else []
    with sentry_sdk.push_scope() as scope:
        scope.set_tag("error_type", "transformation")
        scope.set_tag("route", route)
        scope.set_extra("raw_data_keys", keys)
        scope.set_extra("payload_type", type(raw_data).__name__)
        scope.set_level("error")

        sentry_sdk.capture_exception(error)
