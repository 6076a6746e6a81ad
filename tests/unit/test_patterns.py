"""
Test pattern matching functionality
"""
import pytest
from local_search.core.config import SearchConfig
from local_search.core.models import MatchMode
from local_search.search.patterns import (
    PatternMatcher,
    build_snippet,
    compile_content_pattern,
    compile_pattern,
)


class TestNameMatching:
    """Test name/path matching and scoring"""

    def setup_method(self):
        """Setup test environment"""
        self.matcher = PatternMatcher(SearchConfig(fuzzy=False))

    def test_substring_is_case_insensitive(self):
        """Substring matching ignores case"""
        result = self.matcher.match_name("FooBar", ["foo"])
        assert result.matched
        assert result.score == 25

        assert not self.matcher.match_name("image.jpg", ["text"]).matched

    def test_wildcard_matching(self):
        """Wildcards match the whole text"""
        match = lambda text, term: self.matcher.match_name(text, [term], MatchMode.WILDCARD).matched

        assert match("report.txt", "*.txt")
        assert match("REPORT.TXT", "*.txt")
        assert match("report.txt", "rep?rt.*")
        assert match("report.txt", "[pr]eport.txt")
        assert not match("report.txt.bak", "*.txt")
        assert not match("report.txt", "rep?.txt")
        assert not match("report.txt", "report")

    def test_whole_word_matching(self):
        """Whole-word mode needs word boundaries around the term"""
        assert self.matcher.match_name("catalog cat", ["cat"], MatchMode.WHOLE_WORD).matched
        assert not self.matcher.match_name("catalogcat", ["cat"], MatchMode.WHOLE_WORD).matched
        assert not self.matcher.match_name("catalog", ["cat"], MatchMode.WHOLE_WORD).matched

    def test_whole_word_escapes_term(self):
        """Regex characters in whole-word terms are literal"""
        assert not self.matcher.match_name("a1b", ["a.b"], MatchMode.WHOLE_WORD).matched
        assert self.matcher.match_name("see a.b here", ["a.b"], MatchMode.WHOLE_WORD).matched

    def test_regex_matching(self):
        """Regex terms are case-insensitive"""
        assert self.matcher.match_name("file123.txt", [r"\d+"], MatchMode.REGEX).matched
        assert self.matcher.match_name("test_document.txt", [r"^TEST.*\.txt$"], MatchMode.REGEX).matched
        assert not self.matcher.match_name("document.txt", [r"^\d"], MatchMode.REGEX).matched

    def test_invalid_regex_does_not_match(self):
        """A malformed pattern is a non-match, not an error"""
        result = self.matcher.match_name("anything (", ["(unclosed"], MatchMode.REGEX)
        assert not result.matched
        assert result.score == 0

    def test_missing_text_and_blank_terms(self):
        """None text is empty and blank terms are ignored"""
        assert not self.matcher.match_name(None, ["x"]).matched
        result = self.matcher.match_name("abc", ["", "   "])
        assert not result.matched
        assert result.score == 0

    def test_score_grows_with_matching_terms(self):
        """More matching terms never score lower"""
        two = self.matcher.match_name("alpha beta", ["alpha", "beta"])
        one = self.matcher.match_name("alpha gamma", ["alpha", "beta"])
        assert two.score == 50
        assert one.score == 25
        assert two.score >= one.score


class TestFuzzyMatching:
    """Test edit-distance fallback"""

    def setup_method(self):
        """Setup test environment"""
        self.matcher = PatternMatcher(SearchConfig(fuzzy=True))

    def test_close_text_matches(self):
        """One edit is tolerated for a five letter term"""
        result = self.matcher.match_name("colour", ["color"])
        assert result.matched
        # closeness bonus 9, hit 20, per-hit bonus 5
        assert result.score == 34

    def test_distant_text_does_not_match(self):
        """Unrelated text stays unmatched"""
        result = self.matcher.match_name("completely-different", ["color"])
        assert not result.matched
        assert result.score == 0

    def test_near_miss_adds_score(self):
        """Near misses still contribute a small bonus"""
        result = self.matcher.match_name("abcdefgh", ["abcdxxxx"])
        assert not result.matched
        assert result.score == 6

    def test_closer_text_scores_higher(self):
        """Score is non-decreasing in closeness"""
        close = self.matcher.match_name("documnet", ["document"])
        far = self.matcher.match_name("dokumnxt", ["document"])
        assert close.score >= far.score

    def test_fuzzy_disabled(self):
        """Fuzzy can be switched off per call"""
        assert not self.matcher.match_name("colour", ["color"], fuzzy=False).matched

    def test_fuzzy_tolerance(self):
        """Tolerance is 15% of the term length, at least one"""
        assert self.matcher.fuzzy_tolerance("ab") == 1
        assert self.matcher.fuzzy_tolerance("color") == 1
        assert self.matcher.fuzzy_tolerance("internationalization") == 3


class TestContentMatching:
    """Test content matching and snippets"""

    def setup_method(self):
        """Setup test environment"""
        self.matcher = PatternMatcher(SearchConfig())

    def test_snippet_window(self):
        """Snippet spans 60 characters either side of the hit"""
        text = "a" * 100 + "needle" + "b" * 94
        matched, snippet = self.matcher.find_content_match(text, ["needle"])

        assert matched
        assert snippet == "..." + text[40:160] + "..."
        assert snippet == "..." + "a" * 60 + "needle" + "b" * 54 + "..."

    def test_snippet_clamped_and_trimmed(self):
        """The window is clamped to the text and stripped"""
        assert build_snippet("   hello world   ", 3, 60) == "...hello world..."
        assert build_snippet("x" * 10, 5, 2) == "...xxxx..."

    def test_substring_uses_first_term_found(self):
        """Terms are tried in caller order for snippet placement"""
        text = "alpha " + "." * 100 + " beta"
        matched, snippet = self.matcher.find_content_match(text, ["beta", "alpha"])
        assert matched
        assert "beta" in snippet
        assert "alpha" not in snippet

    def test_substring_case_insensitive(self):
        """Content containment ignores case"""
        matched, _ = self.matcher.find_content_match("This is a TEST document", ["test"])
        assert matched
        assert self.matcher.find_content_match("This is a document", ["missing"]) == (False, None)

    def test_regex_content(self):
        """Regex terms form one alternation"""
        pattern = compile_content_pattern(["fo+", "ba[rz]"], MatchMode.REGEX)
        assert pattern.ok

        matched, snippet = self.matcher.find_content_match("xx BAZ yy", ["fo+", "ba[rz]"], MatchMode.REGEX, pattern)
        assert matched
        assert snippet == "...xx BAZ yy..."

    def test_whole_word_content(self):
        """Whole-word content needs boundaries"""
        pattern = compile_content_pattern(["cat"], MatchMode.WHOLE_WORD)
        assert self.matcher.find_content_match("the cat sat", ["cat"], MatchMode.WHOLE_WORD, pattern)[0]
        assert not self.matcher.find_content_match("concatenate", ["cat"], MatchMode.WHOLE_WORD, pattern)[0]

    def test_invalid_regex_content(self):
        """A failed compilation means no content match"""
        pattern = compile_content_pattern(["(unclosed"], MatchMode.REGEX)
        assert not pattern.ok
        assert pattern.error

        assert self.matcher.find_content_match("(unclosed", ["(unclosed"], MatchMode.REGEX, pattern) == (False, None)

    def test_compile_pattern_result(self):
        """Compilation returns a result instead of raising"""
        assert compile_pattern(r"\d+").ok
        assert compile_pattern("[").error is not None

    def test_pattern_validation(self):
        """Test pattern validation"""
        assert self.matcher.validate_pattern("simple") is None
        assert self.matcher.validate_pattern(r"\d+", MatchMode.REGEX) is None
        assert self.matcher.validate_pattern("(", MatchMode.REGEX) is not None
        assert self.matcher.validate_pattern("(", MatchMode.WHOLE_WORD) is None
        assert self.matcher.validate_pattern("   ") is not None


if __name__ == '__main__':
    pytest.main([__file__])
