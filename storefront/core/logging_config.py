import logging

from storefront.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] [storefront] %(name)s: %(message)s"


def setup_logging(level: str | None = None):
    """Configure root logging once for the whole process."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
