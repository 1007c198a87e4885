"""Logfire cloud observability initialization."""

import logging

import logfire

from parimutuel import __version__
from parimutuel.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings) -> bool:
    """
    Initialize Logfire and bridge Python logging into it.

    Must be called ONCE at application startup, before any market call runs.
    Settlement diagnostics and payout transfer failures are emitted through
    the standard logging module, so bridging the root logger is enough to
    surface them to the operator.

    Args:
        settings: Application settings containing the Logfire token

    Returns:
        True if Logfire was configured, False otherwise.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="parimutuel",
            service_version=__version__,
            environment="paper" if settings.custody.paper_mode else "live",
        )

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire cloud tracking initialized")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
        # Continue running - observability is optional
        return False
