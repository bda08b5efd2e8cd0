from __future__ import annotations

import logging
from importlib.metadata import version

__version__ = version("covgate")

logger = logging.getLogger("covgate")

__all__ = ["__version__", "logger"]
