"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config and strokes-file validation (validators)
    - Color parsing (color)
    - Bézier and polyline geometry (geometry)
    - Atomic I/O (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (stroke_fitting, rendering, pad).

Convenience imports:
    from inkpad.utils import fs, geometry, validators
    from inkpad.utils.logging_config import setup_logging, get_logger
"""

from . import color
from . import fs
from . import geometry
from . import logging_config
from . import validators

from .logging_config import get_logger, log_context, push_context, setup_logging

__all__ = [
    # Modules
    'color',
    'fs',
    'geometry',
    'logging_config',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
    'log_context',
]
