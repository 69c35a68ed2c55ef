from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import List, Dict, Any, Optional


@dataclass
class LinkIssue:
    page: str
    link: Optional[str] = None
    status: Optional[int] = None
    status_text: str = ""
    error: Optional[str] = None
    type: str = "broken-link"  # broken-link | page-fetch-error

    def status_label(self) -> str:
        if self.error:
            return self.error
        return f"{self.status or '—'} {self.status_text or ''}".strip()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SeoIssue:
    page: str
    issue: str  # missing-tags | fetch-failed
    missing: List[str] = field(default_factory=list)
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FileIssue:
    """A sitemap or robots.txt problem, attached to the file it was found in."""
    file: str
    issue: str
    bad: List[str] = field(default_factory=list)
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class HeaderFinding:
    url: str
    missing: List[str] = field(default_factory=list)
    sample: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SizeRecord:
    file: str
    size: Optional[int] = None
    limit: Optional[int] = None
    ok: bool = False
    missing: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
