"""
Content extraction for searchable file formats

Every extractor takes a path and returns plain text. Failures of any kind
(missing file, corrupt archive, converter errors) yield an empty string.
"""
import io
import logging
import os
import re
import shutil
import subprocess
import tempfile
import zipfile
import zlib
from functools import partial
from typing import Callable, Dict, List, Optional

from local_search.core.config import ExtractionConfig, SearchConfig
from local_search.utils.logger import get_logger


logger = get_logger(__name__)

Extractor = Callable[[str], str]

DOCX_MEMBER = "word/document.xml"
XLSX_MEMBER = "xl/sharedStrings.xml"
PPTX_SLIDE = re.compile(r"^ppt/slides/slide\d+\.xml$")

PDFTOTEXT_CANDIDATES = [
    "/usr/bin/pdftotext",
    "/usr/local/bin/pdftotext",
    "/opt/homebrew/bin/pdftotext",
    r"C:\Program Files\xpdf-tools\bin64\pdftotext.exe",
    r"C:\Program Files\Git\mingw64\bin\pdftotext.exe",
    r"C:\ProgramData\chocolatey\bin\pdftotext.exe",
]

_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")

# characters decoded per read when streaming an archive member
MEMBER_CHUNK_CHARS = 64 * 1024


def strip_markup(xml: str) -> str:
    """Replace tags with spaces and collapse whitespace"""
    return _WHITESPACE.sub(" ", _TAG.sub(" ", xml)).strip()


def read_text_file(path: str, max_chars: int = 2_000_000) -> str:
    """
    Read a plain text or source file

    Args:
        path: File to read
        max_chars: Characters kept from the start of the file

    Returns:
        File text, or empty string if it cannot be read
    """
    try:
        with open(path, 'r', encoding='utf-8-sig', errors='replace') as f:
            return f.read(max_chars)
    except (IOError, OSError) as e:
        logger.debug(f"Cannot read {path}: {e}")
        return ""


def read_zip_members(path: str, members: Callable[[List[str]], List[str]], max_chars: int = 2_000_000) -> str:
    """
    Read XML members from an Office Open XML container

    Args:
        path: Container file
        members: Selects the member names to read, given the archive's
            entry names in order
        max_chars: Characters kept from the stripped text

    Returns:
        Concatenated text of the selected members without markup
    """
    try:
        with zipfile.ZipFile(path) as archive:
            parts = []
            collected = 0
            for name in members(archive.namelist()):
                if collected >= max_chars:
                    break
                text = _read_member_text(archive, name, max_chars - collected)
                parts.append(text)
                collected += len(strip_markup(text))
    except (zipfile.BadZipFile, KeyError, OSError, RuntimeError, ValueError, EOFError, zlib.error) as e:
        logger.debug(f"Cannot read container {path}: {e}")
        return ""

    return strip_markup(" ".join(parts))[:max_chars]


def _read_member_text(archive: zipfile.ZipFile, name: str, budget: int) -> str:
    """
    Stream one archive member, stripping markup until budget characters
    of text have been collected

    A tag cut by a chunk boundary is carried over to the next chunk.
    """
    parts = []
    collected = 0
    pending = ""
    with archive.open(name) as raw:
        reader = io.TextIOWrapper(raw, encoding='utf-8', errors='replace')
        while collected < budget:
            chunk = reader.read(MEMBER_CHUNK_CHARS)
            if not chunk:
                break
            pending += chunk
            cut = pending.rfind("<")
            if cut == -1 or ">" in pending[cut:] or len(pending) - cut > MEMBER_CHUNK_CHARS:
                cut = len(pending)
            text = _WHITESPACE.sub(" ", _TAG.sub(" ", pending[:cut]))
            pending = pending[cut:]
            parts.append(text)
            collected += len(text.strip())
        if pending and collected < budget:
            parts.append(_TAG.sub(" ", pending))
    return "".join(parts)


def _docx_members(names: List[str]) -> List[str]:
    return [n for n in names if n == DOCX_MEMBER]


def _xlsx_members(names: List[str]) -> List[str]:
    return [n for n in names if n == XLSX_MEMBER]


def _pptx_members(names: List[str]) -> List[str]:
    return [n for n in names if PPTX_SLIDE.match(n)]


def find_pdftotext(explicit_path: Optional[str] = None) -> Optional[str]:
    """
    Locate the pdftotext executable

    An explicitly configured path wins, then well-known install locations,
    then a PATH lookup.
    """
    candidates = ([explicit_path] if explicit_path else []) + PDFTOTEXT_CANDIDATES
    for candidate in candidates:
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate
    return shutil.which("pdftotext")


class PdfExtractor:
    """
    Extracts PDF text by running pdftotext into a temporary directory
    """

    def __init__(self, executable: str, timeout: float = 60.0, max_chars: int = 2_000_000):
        self.executable = executable
        self.timeout = timeout
        self.max_chars = max_chars

    def __call__(self, path: str) -> str:
        try:
            with tempfile.TemporaryDirectory(prefix="local-search-") as tmp_dir:
                output = os.path.join(tmp_dir, "out.txt")
                subprocess.run(
                    [self.executable, "-layout", "-nopgbrk", "-q", path, output],
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    timeout=self.timeout,
                    check=True,
                )
                return read_text_file(output, self.max_chars)
        except subprocess.TimeoutExpired:
            logger.warning(f"pdftotext timed out after {self.timeout}s on {path}")
        except (subprocess.CalledProcessError, OSError) as e:
            logger.debug(f"pdftotext failed on {path}: {e}")
        return ""


class ExtractorRegistry:
    """
    Maps file extensions to the extractor that can read them
    """

    def __init__(self, config: ExtractionConfig = None, search_config: SearchConfig = None):
        self.config = config or ExtractionConfig()
        max_chars = (search_config or SearchConfig()).max_content_chars
        self.logger = logging.getLogger("ExtractorRegistry")

        text = partial(read_text_file, max_chars=max_chars)
        categories: Dict[str, Extractor] = {
            "text": text,
            "code": text,
            "docx": partial(read_zip_members, members=_docx_members, max_chars=max_chars),
            "xlsx": partial(read_zip_members, members=_xlsx_members, max_chars=max_chars),
            "pptx": partial(read_zip_members, members=_pptx_members, max_chars=max_chars),
        }

        self._by_extension: Dict[str, Extractor] = {}
        for ext in self.config.text_extensions:
            self._by_extension[ext] = categories["text"]
        for ext in self.config.code_extensions:
            self._by_extension[ext] = categories["code"]
        for ext in self.config.office_extensions:
            if ext in categories:
                self._by_extension[ext] = categories[ext]

        if self.config.enable_pdf:
            executable = find_pdftotext(self.config.pdftotext_path)
            if executable:
                self.logger.info(f"PDF content search enabled via {executable}")
                self._by_extension["pdf"] = PdfExtractor(executable, self.config.pdf_timeout, max_chars)
            else:
                self.logger.warning("pdftotext not found; PDF content will not be searched")

    def register(self, extension: str, extractor: Extractor) -> None:
        """Add or replace the extractor for an extension"""
        self._by_extension[extension.lstrip(".").lower()] = extractor

    def supports(self, extension: str) -> bool:
        return extension in self._by_extension

    def get(self, extension: str) -> Optional[Extractor]:
        return self._by_extension.get(extension)

    def extract(self, path: str, extension: str) -> str:
        """
        Extract plain text from a file

        Args:
            path: File to read
            extension: Lowercase extension without dot

        Returns:
            Extracted text, empty for unsupported formats or failures
        """
        extractor = self._by_extension.get(extension)
        if extractor is None:
            return ""
        try:
            return extractor(path)
        except Exception as e:
            # custom extractors may raise
            self.logger.error(f"Extractor for .{extension} failed on {path}: {e}")
            return ""
