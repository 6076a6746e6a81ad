"""
Local Search

Finds files on the local machine by name, path and content, using substring,
wildcard, regex, whole-word or fuzzy matching, and ranks them by relevance.
"""

__version__ = "0.1.0"

from .core.config import Config
from .core.models import MatchMode, ResultRecord
from .search.engine import SearchEngine
from .search.patterns import PatternMatcher

__all__ = [
    "Config",
    "MatchMode",
    "ResultRecord",
    "SearchEngine",
    "PatternMatcher",
]
