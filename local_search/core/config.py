"""
Configuration management for the local search engine
"""
import json
import os
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from local_search.core.models import MatchMode


TEXT_EXTENSIONS = [
    "txt", "md", "csv", "log", "ini", "json", "xml", "yaml", "yml",
    "ps1", "psm1", "psd1", "sh", "bash", "bat", "cmd",
]
CODE_EXTENSIONS = [
    "cpp", "c", "cc", "h", "hpp", "inl", "cs", "java", "py", "js", "ts",
    "rs", "go", "swift", "kt", "m", "mm",
]
OFFICE_EXTENSIONS = ["docx", "xlsx", "pptx"]
DEFAULT_EXCLUDE_DIRS = [
    ".git", ".svn", ".hg", "node_modules", "__pycache__", ".venv",
    "bin", "obj", ".vs", ".idea",
]


def normalize_extensions(values: List[str]) -> List[str]:
    """Lower-case extensions and strip leading dots, dropping blanks"""
    result = []
    for value in values:
        ext = value.strip().lstrip(".").lower()
        if ext and ext not in result:
            result.append(ext)
    return result


class SearchConfig(BaseModel):
    """Configuration for matching and scoring"""
    model_config = ConfigDict(frozen=True)

    mode: MatchMode = MatchMode.SUBSTRING
    fuzzy: bool = True
    content: bool = False
    max_results: int = Field(default=200, ge=1)
    fuzzy_ratio: float = Field(default=0.15, ge=0)
    fuzzy_ceiling: int = 10
    name_hit_score: int = 20
    hit_bonus: int = 5
    content_bonus: int = 80
    snippet_radius: int = Field(default=60, ge=0)
    max_content_chars: int = Field(default=2_000_000, ge=1)


class ExtractionConfig(BaseModel):
    """Configuration for content extraction"""
    model_config = ConfigDict(frozen=True)

    enable_pdf: bool = False
    pdftotext_path: Optional[str] = None
    pdf_timeout: float = Field(default=60.0, gt=0)
    text_extensions: List[str] = Field(default_factory=lambda: list(TEXT_EXTENSIONS))
    code_extensions: List[str] = Field(default_factory=lambda: list(CODE_EXTENSIONS))
    office_extensions: List[str] = Field(default_factory=lambda: list(OFFICE_EXTENSIONS))

    @field_validator("text_extensions", "code_extensions", "office_extensions")
    @classmethod
    def _normalize(cls, value: List[str]) -> List[str]:
        return normalize_extensions(value)


class FilterConfig(BaseModel):
    """Configuration for candidate file enumeration"""
    model_config = ConfigDict(frozen=True)

    include_extensions: List[str] = Field(default_factory=list)
    exclude_extensions: List[str] = Field(default_factory=list)
    exclude_dirs: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    max_depth: Optional[int] = Field(default=None, ge=0)
    since: Optional[datetime] = None
    min_size: Optional[int] = Field(default=None, ge=0)  # bytes
    max_size: Optional[int] = Field(default=None, ge=0)  # bytes
    trace_folders: bool = False

    @field_validator("include_extensions", "exclude_extensions")
    @classmethod
    def _normalize(cls, value: List[str]) -> List[str]:
        return normalize_extensions(value)

    @field_validator("since")
    @classmethod
    def _local_time(cls, value: Optional[datetime]) -> Optional[datetime]:
        # file times are compared as naive local datetimes
        if value is not None and value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value


class OutputConfig(BaseModel):
    """Configuration for result presentation"""
    model_config = ConfigDict(frozen=True)

    show_snippet: bool = True
    json_output: bool = False
    list_output: bool = False
    csv_path: Optional[str] = None


class Config(BaseModel):
    """Main configuration class"""
    model_config = ConfigDict(frozen=True)

    search: SearchConfig = Field(default_factory=SearchConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    filters: FilterConfig = Field(default_factory=FilterConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables"""
        data: Dict[str, Dict[str, Any]] = {"search": {}, "extraction": {}, "filters": {}}
        if os.getenv("LOCAL_SEARCH_MAX_RESULTS"):
            data["search"]["max_results"] = int(os.environ["LOCAL_SEARCH_MAX_RESULTS"])
        if os.getenv("LOCAL_SEARCH_PDF"):
            data["extraction"]["enable_pdf"] = os.environ["LOCAL_SEARCH_PDF"].lower() in ("1", "true", "yes")
        if os.getenv("LOCAL_SEARCH_PDFTOTEXT"):
            data["extraction"]["pdftotext_path"] = os.environ["LOCAL_SEARCH_PDFTOTEXT"]
        if os.getenv("LOCAL_SEARCH_EXCLUDE_DIRS"):
            data["filters"]["exclude_dirs"] = [
                d.strip() for d in os.environ["LOCAL_SEARCH_EXCLUDE_DIRS"].split(",") if d.strip()
            ]
        return cls(**data)

    @classmethod
    def load_from_file(cls, file_path: str) -> "Config":
        """Load configuration from JSON file"""
        with open(file_path, 'r') as f:
            data = json.load(f)
        return cls(**data)

    def save_to_file(self, file_path: str) -> None:
        """Save configuration to JSON file"""
        with open(file_path, 'w') as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

    def with_overrides(self, overrides: Dict[str, Dict[str, Any]]) -> "Config":
        """
        Return a new configuration with section values replaced

        Args:
            overrides: Mapping of section name to field values, e.g.
                {"search": {"mode": MatchMode.REGEX}}. None values are skipped.

        Returns:
            A new validated Config instance
        """
        data = self.model_dump()
        for section, values in overrides.items():
            for key, value in values.items():
                if value is not None:
                    data[section][key] = value
        return Config(**data)
