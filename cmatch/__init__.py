"""cmatch - streaming regex highlighter for terminal text."""
from .version import __version__

__all__ = ["__version__"]
