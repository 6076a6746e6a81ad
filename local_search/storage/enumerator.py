"""
Candidate file enumeration for local search
"""
import logging
import os
from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Tuple

from local_search.core.config import FilterConfig
from local_search.core.models import CandidateFile
from local_search.utils.helpers import validate_directory


class FileEnumerator:
    """
    Walks root directories and yields files that pass the configured filters
    """

    def __init__(self, config: FilterConfig = None):
        self.config = config or FilterConfig()
        self.logger = logging.getLogger("FileEnumerator")
        self.excluded_dirs = {d.lower() for d in self.config.exclude_dirs}
        self.visited_dirs: List[str] = []

    def iter_candidates(self, roots: Iterable[str]) -> Iterator[CandidateFile]:
        """
        Yield candidate files under the given roots

        Directories are walked with an explicit stack; roots are depth 0.
        Entries that cannot be read are skipped.

        Args:
            roots: Directories to search

        Yields:
            CandidateFile for every file passing the filters
        """
        for root in roots:
            root = os.path.abspath(root)
            if not validate_directory(root):
                self.logger.warning(f"Directory does not exist: {root}")
                continue

            stack: List[Tuple[str, int]] = [(root, 0)]
            while stack:
                directory, depth = stack.pop()
                self._trace(directory)

                try:
                    with os.scandir(directory) as it:
                        entries = sorted(it, key=lambda e: e.name)
                except OSError as e:
                    self.logger.debug(f"Skipping unreadable directory {directory}: {e}")
                    continue

                subdirs = []
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            if entry.name.lower() in self.excluded_dirs:
                                continue
                            if self.config.max_depth is None or depth < self.config.max_depth:
                                subdirs.append((entry.path, depth + 1))
                        elif entry.is_file():
                            candidate = self._to_candidate(entry)
                            if candidate is not None:
                                yield candidate
                    except OSError as e:
                        self.logger.debug(f"Skipping {entry.path}: {e}")

                # reversed so subdirectories are visited in name order
                stack.extend(reversed(subdirs))

    def accepts(self, extension: str, size: int, last_modified: datetime) -> bool:
        """Check a file's metadata against the filters"""
        config = self.config
        if config.include_extensions and extension not in config.include_extensions:
            return False
        if extension in config.exclude_extensions:
            return False
        if config.since is not None and last_modified < config.since:
            return False
        if config.min_size is not None and size < config.min_size:
            return False
        if config.max_size is not None and size > config.max_size:
            return False
        return True

    def _to_candidate(self, entry: os.DirEntry) -> Optional[CandidateFile]:
        stat = entry.stat()
        extension = os.path.splitext(entry.name)[1].lstrip(".").lower()
        last_modified = datetime.fromtimestamp(stat.st_mtime)

        if not self.accepts(extension, stat.st_size, last_modified):
            return None

        return CandidateFile(
            name=entry.name,
            path=os.path.abspath(entry.path),
            extension=extension,
            size=stat.st_size,
            last_modified=last_modified,
        )

    def _trace(self, directory: str) -> None:
        if self.config.trace_folders:
            self.visited_dirs.append(directory)
            self.logger.info(f"Scanning {directory}")
