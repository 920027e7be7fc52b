"""Front matter schema, page records, and lint result models"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


class PageKind(str, Enum):
    """Dated posts versus static, undated pages (e.g. "About Me")"""
    post = "post"
    page = "page"


class Severity(str, Enum):
    error = "error"
    warning = "warning"


def _to_datetime(value: Any) -> Optional[datetime]:
    """Coerce a YAML date, timestamp, or ISO 8601 string to a datetime."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"unparseable date {value!r}") from None
    raise ValueError(f"expected a date or timestamp, got {type(value).__name__}")


class FrontMatter(BaseModel):
    """The recognized front matter fields; unrecognized keys are kept as extras."""
    model_config = ConfigDict(extra="allow")

    title: str
    date: Optional[datetime] = None
    draft: StrictBool = False
    tags: list[str] = Field(default_factory=list)
    slug: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be empty")
        return v.strip()

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v: Any) -> Optional[datetime]:
        return _to_datetime(v)

    @field_validator("draft", mode="before")
    @classmethod
    def _draft_default(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if not isinstance(v, list):
            raise ValueError(f"expected a list of strings, got {type(v).__name__}")
        for item in v:
            if not isinstance(item, str):
                raise ValueError(f"tag {item!r} is not a string")
        return list(dict.fromkeys(v))


class Page(BaseModel):
    """A validated content file, as the generator would see it."""
    path:        str                         # posix path relative to the content root (identity)
    output_path: str
    kind:        PageKind
    title:       str
    file_date:   Optional[date] = None       # must precede the `date` field, which shadows the type
    date:        Optional[datetime] = None   # front matter date, else the filename date
    draft:       bool = False
    tags:        list[str] = Field(default_factory=list)
    frontmatter: dict[str, Any] = Field(default_factory=dict)
    body:        str = ""
    hash:        str
    words:       int = 0
    summary:     str = ""

    @property
    def is_static(self) -> bool:
        return self.kind == PageKind.page


class Issue(BaseModel):
    """A single lint finding for one content file."""
    path:     str
    rule:     str
    severity: Severity
    message:  str

    def __str__(self) -> str:
        return f"{self.path}: {self.severity.value} [{self.rule}] {self.message}"


@dataclass
class ParsedPage:
    """Internal parse result carrying markdown-it tokens; not persisted."""
    path:        Path
    rel_path:    Path          # relative to the content root
    raw:         str           # full file content (includes front matter)
    body:        str           # front matter stripped
    frontmatter: dict[str, Any]
    has_block:   bool          # file opened with a front matter block
    hash:        str
    tokens:      list          # markdown-it Token objects


@dataclass
class LintReport:
    """Outcome of linting a content tree: the pages that validated plus every issue found."""
    files:  int = 0
    pages:  list[Page] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)
    complete: bool = True   # False when only part of the content tree was checked

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.error]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.warning]

    def ok(self, strict: bool = False) -> bool:
        """No errors; in strict mode, no warnings either."""
        return not self.errors and not (strict and self.warnings)
