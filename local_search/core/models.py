"""
Data types shared by the matcher, the search engine and the presenters
"""
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class MatchMode(str, Enum):
    """How a term is compared against a file name or its content"""
    SUBSTRING = "substring"
    WILDCARD = "wildcard"
    REGEX = "regex"
    WHOLE_WORD = "whole_word"


class HitKind(str, Enum):
    """Where a result was matched"""
    NAME = "Name"
    CONTENT = "Content"


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    score: int


@dataclass(frozen=True)
class CompiledPattern:
    """
    Outcome of compiling a search pattern.

    Exactly one of ``pattern`` and ``error`` is set.
    """
    pattern: Optional["re.Pattern[str]"] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.pattern is not None

    def search(self, text: str) -> Optional["re.Match[str]"]:
        """Search text, treating a failed compilation as no match"""
        if self.pattern is None:
            return None
        return self.pattern.search(text)


@dataclass(frozen=True)
class CandidateFile:
    """A file that survived enumeration filters"""
    name: str
    path: str
    extension: str
    size: int
    last_modified: datetime


@dataclass(frozen=True)
class ResultRecord:
    """A file that matched by name or content"""
    score: int
    name: str
    extension: str
    size_kb: float
    last_modified: datetime
    hit_kind: HitKind
    path: str
    snippet: Optional[str] = None
