"""
Logging setup for applications embedding scrollfeed.

Library modules only create ``ScrollFeed.*`` loggers; call
:func:`configure_logging` once from the entry point. The level can be
overridden from the environment:

    export SCROLLFEED_LOGLEVEL=DEBUG
"""

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ENV_LEVEL = "SCROLLFEED_LOGLEVEL"


def resolve_level(level: Optional[int] = None) -> int:
    env_level = os.getenv(ENV_LEVEL)
    if env_level:
        return getattr(logging, env_level.upper(), logging.INFO)
    return logging.INFO if level is None else level


def configure_logging(level: Optional[int] = None) -> None:
    """Initialize root logging once. SCROLLFEED_LOGLEVEL wins over *level*."""
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(level=resolve_level(level), format=LOG_FORMAT)
