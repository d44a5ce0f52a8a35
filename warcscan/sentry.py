import logging
import os

# PyPI:
import sentry_sdk

logger = logging.getLogger(__name__)


def init() -> bool:
    """
    Send uncaught errors to Sentry, if SENTRY_DSN is set.
    """

    sentry_dsn = os.environ.get("SENTRY_DSN")
    if not sentry_dsn:
        logger.debug("SENTRY_DSN not set; not reporting errors to Sentry")
        return False

    # release defaults to SENTRY_RELEASE env or git commit
    sentry_sdk.init(dsn=sentry_dsn)
    return True
