"""Format URL repair, resolution and selection."""

from .cipher import decipher
from .ncode import ncode
from .resolver import add_format_meta, resolve_formats
from .selector import CustomFilter, CustomQuality, select_format

__all__ = [
    "CustomFilter",
    "CustomQuality",
    "add_format_meta",
    "decipher",
    "ncode",
    "resolve_formats",
    "select_format",
]
