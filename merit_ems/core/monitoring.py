from importlib.metadata import PackageNotFoundError, version

import sentry_sdk

from merit_ems.core.config import settings
from merit_ems.core.logging import get_logger

logger = get_logger(__name__)


def _release() -> str | None:
    try:
        return f"merit-ems-timeclock@{version('merit-ems-timeclock')}"
    except PackageNotFoundError:
        return None


def configure_error_monitoring() -> bool:
    """Report unhandled API and job errors to Sentry when a DSN is configured."""
    if not settings.sentry_dsn:
        return False
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.env,
        release=_release(),
        traces_sample_rate=0.2,
        send_default_pii=False,
    )
    logger.info("error_monitoring_enabled", environment=settings.env)
    return True
