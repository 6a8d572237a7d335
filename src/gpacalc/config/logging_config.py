import logging
from typing import Optional

from gpacalc.config.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
HANDLER_NAME = "gpacalc"


def configure_logging(level: Optional[str] = None) -> None:
    root = logging.getLogger("gpacalc")
    root.setLevel((level or settings.log_level).upper())
    if any(h.get_name() == HANDLER_NAME for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
