"""Namespaced loggers for chatmark"""

import logging


ROOT_LOGGER = "chatmark"


def get_logger(name: str) -> logging.Logger:
    """Return a stdlib logger under the "chatmark." namespace.

    >>> get_logger("dispatch").name
    'chatmark.dispatch'
    """
    if not (name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + ".")):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(level: str = "WARNING") -> None:
    """Attach a stderr handler to the chatmark root logger at the given level."""
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(level.upper())
