"""
Search engine that matches candidate files by name and content
"""
import logging
from typing import Iterable, List, Optional

from local_search.core.config import Config
from local_search.core.models import CandidateFile, CompiledPattern, HitKind, ResultRecord
from local_search.output.presenter import rank_results
from local_search.search.extractors import ExtractorRegistry
from local_search.search.patterns import (
    REGEX_MODES,
    PatternMatcher,
    active_terms,
    compile_content_pattern,
)
from local_search.storage.enumerator import FileEnumerator


class SearchEngine:
    """
    Evaluates candidate files one at a time and collects ranked results
    """

    def __init__(
        self,
        config: Config = None,
        extractors: Optional[ExtractorRegistry] = None,
        matcher: Optional[PatternMatcher] = None,
    ):
        self.config = config or Config()
        self.matcher = matcher or PatternMatcher(self.config.search)
        self.extractors = extractors or ExtractorRegistry(self.config.extraction, self.config.search)
        self.enumerator: Optional[FileEnumerator] = None
        self.logger = logging.getLogger("SearchEngine")

    def run(self, roots: Iterable[str], terms: Iterable[str]) -> List[ResultRecord]:
        """
        Enumerate files under roots and search them

        Args:
            roots: Directories to walk
            terms: Search terms

        Returns:
            Ranked result records
        """
        self.enumerator = FileEnumerator(self.config.filters)
        return self.search(self.enumerator.iter_candidates(roots), terms)

    def search(self, candidates: Iterable[CandidateFile], terms: Iterable[str]) -> List[ResultRecord]:
        """
        Match candidates against terms

        Candidates are consumed in order until ``max_results`` records have
        been accepted; ranking is applied to that accepted subset only.

        Args:
            candidates: Files to evaluate
            terms: Search terms

        Returns:
            Result records sorted by score, then modification time

        Raises:
            ValueError: If no non-blank term is given
        """
        terms = active_terms(terms)
        if not terms:
            raise ValueError("Search terms cannot be empty")

        search_config = self.config.search
        content_pattern = self._prepare_pattern(terms)

        self.logger.info(
            f"Starting search: terms={terms}, mode='{search_config.mode.value}', "
            f"fuzzy={search_config.fuzzy}, content={search_config.content}"
        )

        results: List[ResultRecord] = []
        scanned = 0
        for candidate in candidates:
            scanned += 1
            record = self.evaluate(candidate, terms, content_pattern)
            if record is None:
                continue

            results.append(record)
            if len(results) >= search_config.max_results:
                self.logger.info(f"Reached max results ({search_config.max_results}), stopping")
                break

        self.logger.info(f"Search completed: {len(results)} results from {scanned} files")
        return rank_results(results, search_config.max_results)

    def evaluate(
        self,
        candidate: CandidateFile,
        terms: List[str],
        content_pattern: Optional[CompiledPattern] = None,
    ) -> Optional[ResultRecord]:
        """
        Score a single file

        Args:
            candidate: File to evaluate
            terms: Non-blank search terms
            content_pattern: Precompiled pattern for regex/whole-word modes

        Returns:
            ResultRecord, or None if neither name nor content matched
        """
        search_config = self.config.search
        name_result = self.matcher.match_name(f"{candidate.name} {candidate.path}", terms)

        content_hit = False
        snippet = None
        if search_config.content and self.extractors.supports(candidate.extension):
            text = self.extractors.extract(candidate.path, candidate.extension)
            if text:
                content_hit, snippet = self.matcher.find_content_match(
                    text, terms, search_config.mode, content_pattern
                )

        if not name_result.matched and not content_hit:
            return None

        score = name_result.score
        if content_hit:
            score += search_config.content_bonus

        return ResultRecord(
            score=score,
            name=candidate.name,
            extension=candidate.extension,
            size_kb=round(candidate.size / 1024, 2),
            last_modified=candidate.last_modified,
            hit_kind=HitKind.CONTENT if content_hit else HitKind.NAME,
            path=candidate.path,
            snippet=snippet if self.config.output.show_snippet else None,
        )

    def _prepare_pattern(self, terms: List[str]) -> Optional[CompiledPattern]:
        mode = self.config.search.mode
        if mode not in REGEX_MODES:
            return None

        errors = [e for e in (self.matcher.validate_pattern(t, mode) for t in terms) if e]
        content_pattern = compile_content_pattern(terms, mode)
        if not content_pattern.ok and not errors:
            errors.append(content_pattern.error)

        if errors:
            message = (
                "Some search terms are not valid regular expressions and will never match: "
                + "; ".join(errors)
            )
            if not content_pattern.ok and self.config.search.content:
                message += ". Content search is disabled for this run because the combined pattern does not compile"
            self.logger.warning(message)
        return content_pattern
