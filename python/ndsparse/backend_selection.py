"""
Logic for backend selection.

This module decides which storage backend new sparse arrays use when no
device is passed explicitly. The choice is read from the environment
variable NDSPARSE_BACKEND:

    "py"  dict keyed by flat offset (default)
    "np"  sorted numpy offset/value arrays

If an unknown backend is specified, a RuntimeError is raised on import.
"""
import logging
import os

logger = logging.getLogger(__name__)

BACKENDS = ("py", "np")

BACKEND = os.environ.get("NDSPARSE_BACKEND", "py")


if BACKEND not in BACKENDS:
    raise RuntimeError("Unknown ndsparse sparse backend %s" % BACKEND)

logger.info("Using %s sparse backend", BACKEND)
