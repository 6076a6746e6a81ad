"""
Test candidate file enumeration
"""
import os
import time
from datetime import datetime, timedelta
import pytest
from local_search.core.config import FilterConfig
from local_search.storage.enumerator import FileEnumerator


class TestFileEnumerator:
    """Test directory walking and filters"""

    @pytest.fixture(autouse=True)
    def tree(self, tmp_path):
        """Create a small directory tree"""
        (tmp_path / "sub" / "deep").mkdir(parents=True)
        (tmp_path / "node_modules").mkdir()
        (tmp_path / "a.txt").write_text("a" * 10)
        (tmp_path / "sub" / "b.PY").write_text("b" * 2000)
        (tmp_path / "sub" / "deep" / "d.md").write_text("d")
        (tmp_path / "node_modules" / "c.txt").write_text("c")
        self.root = str(tmp_path)

    def names(self, **filters):
        enumerator = FileEnumerator(FilterConfig(**filters))
        return [c.name for c in enumerator.iter_candidates([self.root])]

    def test_walk_skips_excluded_dirs(self):
        """Default exclusions skip node_modules"""
        assert self.names() == ["a.txt", "b.PY", "d.md"]

    def test_candidate_fields(self):
        """Candidates carry normalized metadata"""
        candidate = next(c for c in FileEnumerator().iter_candidates([self.root]) if c.name == "b.PY")
        assert candidate.extension == "py"
        assert candidate.size == 2000
        assert os.path.isabs(candidate.path)
        assert candidate.path.endswith(os.path.join("sub", "b.PY"))
        assert isinstance(candidate.last_modified, datetime)

    def test_max_depth(self):
        """Roots are depth zero"""
        assert self.names(max_depth=0) == ["a.txt"]
        assert self.names(max_depth=1) == ["a.txt", "b.PY"]

    def test_exclude_dirs_case_insensitive(self):
        """Excluded directory names ignore case"""
        assert self.names(exclude_dirs=["SUB"]) == ["a.txt", "c.txt"]

    def test_extension_filters(self):
        """Include and exclude lists use normalized extensions"""
        assert self.names(include_extensions=[".py"]) == ["b.PY"]
        assert self.names(exclude_extensions=["TXT", "md"]) == ["b.PY"]

    def test_size_filters(self):
        """Size limits are inclusive byte counts"""
        assert self.names(min_size=10) == ["a.txt", "b.PY"]
        assert self.names(max_size=10) == ["a.txt", "d.md"]

    def test_since_filter(self):
        """Files older than the floor are skipped"""
        old = time.time() - 10 * 86400
        os.utime(os.path.join(self.root, "a.txt"), (old, old))
        assert self.names(since=datetime.now() - timedelta(days=1)) == ["b.PY", "d.md"]

    def test_trace_folders(self):
        """Visited directories are recorded when tracing"""
        enumerator = FileEnumerator(FilterConfig(trace_folders=True))
        list(enumerator.iter_candidates([self.root]))
        assert enumerator.visited_dirs[0] == os.path.abspath(self.root)
        assert os.path.join(os.path.abspath(self.root), "sub", "deep") in enumerator.visited_dirs
        assert not any("node_modules" in d for d in enumerator.visited_dirs)

    def test_missing_root(self, tmp_path):
        """Non-existent roots are skipped"""
        enumerator = FileEnumerator()
        assert list(enumerator.iter_candidates([str(tmp_path / "nope")])) == []

    def test_accepts(self):
        """Metadata checks can be used without walking"""
        enumerator = FileEnumerator(FilterConfig(include_extensions=["txt"], max_size=100))
        now = datetime.now()
        assert enumerator.accepts("txt", 50, now)
        assert not enumerator.accepts("txt", 500, now)
        assert not enumerator.accepts("md", 50, now)


if __name__ == '__main__':
    pytest.main([__file__])
