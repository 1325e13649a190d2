"""Logging configuration for the command line."""

import logging
import os
import sys

VERBOSE_FORMAT = "%(message)s"
DEBUG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """
    Configure the root logger once per CLI invocation.

    Progress messages are logged at INFO and only shown with --verbose.
    LOG_LEVEL=DEBUG in the environment switches to a detailed format.
    """
    env_level = os.getenv("LOG_LEVEL", "").upper()
    if env_level == "DEBUG":
        level = logging.DEBUG
        fmt = DEBUG_FORMAT
    else:
        level = logging.INFO if verbose else logging.WARNING
        fmt = VERBOSE_FORMAT

    logging.basicConfig(level=level, format=fmt, stream=sys.stdout, force=True)
