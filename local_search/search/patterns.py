"""
Pattern matching utilities for local search
"""
import fnmatch
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Tuple

from local_search.core.config import SearchConfig
from local_search.core.models import CompiledPattern, MatchMode, MatchResult
from local_search.search.distance import edit_distance


REGEX_MODES = (MatchMode.REGEX, MatchMode.WHOLE_WORD)
ELLIPSIS = "..."


@lru_cache(maxsize=256)
def compile_pattern(source: str) -> CompiledPattern:
    """
    Compile a case-insensitive regular expression

    Args:
        source: Regular expression source

    Returns:
        CompiledPattern carrying either the compiled expression or the error
    """
    try:
        return CompiledPattern(pattern=re.compile(source, re.IGNORECASE))
    except re.error as e:
        return CompiledPattern(error=f"invalid pattern {source!r}: {e}")


def active_terms(terms: Iterable[str]) -> List[str]:
    """Drop blank terms while keeping caller order"""
    return [term for term in terms if term and term.strip()]


def term_pattern_source(term: str, mode: MatchMode) -> str:
    if mode == MatchMode.WHOLE_WORD:
        return r"\b" + re.escape(term) + r"\b"
    return term


def compile_content_pattern(terms: Iterable[str], mode: MatchMode) -> CompiledPattern:
    """
    Build the single alternation pattern used for content search

    Regex mode joins the raw terms as ``(t1|t2)``; whole-word mode escapes
    them and wraps the group in word boundaries.
    """
    terms = active_terms(terms)
    if mode == MatchMode.WHOLE_WORD:
        source = r"\b(" + "|".join(re.escape(t) for t in terms) + r")\b"
    else:
        source = "(" + "|".join(terms) + ")"
    return compile_pattern(source)


def build_snippet(text: str, index: int, radius: int = 60) -> str:
    """
    Cut a preview window around a match position

    Args:
        text: Full text
        index: Start position of the match
        radius: Characters kept on each side of ``index``

    Returns:
        Trimmed excerpt wrapped in ellipsis markers
    """
    start = max(0, index - radius)
    end = min(len(text), index + radius)
    return f"{ELLIPSIS}{text[start:end].strip()}{ELLIPSIS}"


class PatternMatcher:
    """
    Multi-mode matching of search terms against names and content
    """

    def __init__(self, config: SearchConfig = None):
        self.config = config or SearchConfig()

    def match_name(
        self,
        text: Optional[str],
        terms: Iterable[str],
        mode: Optional[MatchMode] = None,
        fuzzy: Optional[bool] = None,
    ) -> MatchResult:
        """
        Match terms against a file name/path and score the result

        Every term is evaluated; each matched term adds ``name_hit_score``
        and the total gets ``hit_bonus`` per matched term. With fuzzy
        matching on, terms that missed still add a closeness bonus.

        Args:
            text: Name and path of the file (None is treated as empty)
            terms: Search terms
            mode: Match mode, defaults to the configured one
            fuzzy: Edit-distance fallback, defaults to the configured one

        Returns:
            MatchResult with the accumulated score
        """
        mode = self.config.mode if mode is None else mode
        fuzzy = self.config.fuzzy if fuzzy is None else fuzzy
        text = text or ""
        lowered = text.lower()

        score = 0
        hits = 0
        for term in active_terms(terms):
            matched = self._match_term(text, lowered, term, mode)

            if not matched and fuzzy:
                distance = edit_distance(lowered, term.lower())
                matched = distance <= self.fuzzy_tolerance(term)
                score += max(0, self.config.fuzzy_ceiling - distance)

            if matched:
                score += self.config.name_hit_score
                hits += 1

        score += hits * self.config.hit_bonus
        return MatchResult(matched=hits > 0, score=score)

    def fuzzy_tolerance(self, term: str) -> int:
        """Largest edit distance still accepted as a fuzzy match"""
        return max(1, int(self.config.fuzzy_ratio * len(term)))

    def find_content_match(
        self,
        text: str,
        terms: Iterable[str],
        mode: Optional[MatchMode] = None,
        pattern: Optional[CompiledPattern] = None,
    ) -> Tuple[bool, Optional[str]]:
        """
        Look for terms inside extracted content

        Args:
            text: Extracted plain text
            terms: Search terms, tried in order for snippet placement
            mode: Match mode, defaults to the configured one
            pattern: Precompiled content pattern for regex/whole-word modes

        Returns:
            Tuple of (matched, snippet around the first hit)
        """
        mode = self.config.mode if mode is None else mode
        if not text:
            return False, None

        if mode in REGEX_MODES:
            if pattern is None:
                pattern = compile_content_pattern(terms, mode)
            match = pattern.search(text)
            if match is None:
                return False, None
            return True, build_snippet(text, match.start(), self.config.snippet_radius)

        lowered = text.lower()
        for term in active_terms(terms):
            index = lowered.find(term.lower())
            if index >= 0:
                return True, build_snippet(text, index, self.config.snippet_radius)

        return False, None

    def validate_pattern(self, pattern: str, mode: Optional[MatchMode] = None) -> Optional[str]:
        """
        Validate a search term

        Args:
            pattern: Term to validate
            mode: Match mode the term will be used with

        Returns:
            None if the term is usable, otherwise an error message
        """
        mode = self.config.mode if mode is None else mode
        if not pattern or not pattern.strip():
            return "empty search term"

        if mode in REGEX_MODES:
            return compile_pattern(term_pattern_source(pattern, mode)).error

        return None

    def _match_term(self, text: str, lowered: str, term: str, mode: MatchMode) -> bool:
        if mode in REGEX_MODES:
            return compile_pattern(term_pattern_source(term, mode)).search(text) is not None

        if mode == MatchMode.WILDCARD:
            return fnmatch.fnmatchcase(lowered, term.lower())

        return term.lower() in lowered
