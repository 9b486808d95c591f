"""Error tracking and monitoring setup."""
import logging
from typing import Optional

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from app.core.config import SENTRY_DSN, ENVIRONMENT

SENSITIVE_HEADERS = ['authorization', 'api-key', 'x-api-key', 'x-auth-token',
                     'cookie', 'set-cookie', 'password', 'secret']
# Request fields that identify a person or carry credentials
SENSITIVE_KEYS = ['password', 'secret', 'api_key', 'token', 'auth', 'owner_name']
REDACTED = '***REDACTED***'


def filter_sensitive_data(event, hint):
    """Filter sensitive data from Sentry events."""
    request = event.get('request')
    if request:
        if 'headers' in request:
            request['headers'] = {
                k: REDACTED if k.lower() in SENSITIVE_HEADERS else v
                for k, v in request['headers'].items()
            }

        data = request.get('data')
        if isinstance(data, dict):
            for key in SENSITIVE_KEYS:
                if key in data:
                    data[key] = REDACTED

    extra = event.get('extra')
    if isinstance(extra, dict) and 'owner_name' in extra:
        extra['owner_name'] = REDACTED

    return event


def setup_error_tracking(
    dsn: Optional[str] = None,
    environment: Optional[str] = None,
    traces_sample_rate: float = 0.0
) -> bool:
    """
    Setup Sentry error tracking.

    Args:
        dsn: Sentry DSN (defaults to SENTRY_DSN from config)
        environment: Environment name (development, staging, production)
        traces_sample_rate: Percentage of transactions to trace (0.0 to 1.0)

    Returns:
        True if Sentry was initialized, False otherwise
    """
    dsn = dsn or SENTRY_DSN
    if not dsn:
        logging.info("Sentry DSN not provided. Error tracking disabled.")
        return False
    if sentry_sdk.is_initialized():
        return True

    environment = environment or ENVIRONMENT

    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            integrations=[
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            ],
            traces_sample_rate=traces_sample_rate,
            before_send=filter_sensitive_data,
            attach_stacktrace=True,
            send_default_pii=False,
        )
    except Exception as e:
        logging.error(f"Failed to initialize Sentry: {e}")
        return False

    logging.info(f"Sentry error tracking initialized for environment: {environment}")
    return True


def capture_exception(error: Exception, context: Optional[dict] = None) -> bool:
    """Send an exception to Sentry if it has been initialized."""
    if not sentry_sdk.is_initialized():
        return False

    with sentry_sdk.new_scope() as scope:
        if context:
            for key, value in context.items():
                scope.set_context(key, {"value": str(value)})
        sentry_sdk.capture_exception(error)
    return True
