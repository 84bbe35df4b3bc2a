"""docdash command-line interface."""

from docdash import __version__

__all__ = ["__version__"]
