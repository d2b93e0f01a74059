"""Google API services used by drive-deploy."""

from . import drive

__all__ = [
    "drive",
]
