# telecom_cart/utils/logging.py
import logging
import sys

from telecom_cart.utils.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Jeden handler na stdout dla calej aplikacji, wolane raz przy starcie."""
    global _configured
    root = logging.getLogger()
    root.setLevel(level or LOG_LEVEL)

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # uvicorn ma wlasne handlery, nie dublujemy access logow
    logging.getLogger("uvicorn.access").propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
