from __future__ import annotations

from typing import Dict, List, Pattern
import re

import requests

from ..base_module import SiteCheck
from ..issues import SeoIssue


def hreflang_pattern(lang: str) -> Pattern:
    return re.compile(
        r"""<link[^>]+rel=["']alternate["'][^>]+hreflang=["']""" + re.escape(lang) + r"""["'][^>]*>""",
        re.I,
    )


def marker_patterns(locales, default_marker: str) -> Dict[str, Pattern]:
    """Ordered marker name -> presence pattern. Structural tests only, values are not checked."""
    patterns = {"canonical": re.compile(r"""<link[^>]+rel=["']canonical["'][^>]+>""", re.I)}
    for locale in locales:
        patterns[f"hreflang {locale}"] = hreflang_pattern(locale)
    patterns[f"hreflang {default_marker}"] = hreflang_pattern(default_marker)
    patterns["Open Graph"] = re.compile(r"""<meta[^>]+property=["']og:""", re.I)
    patterns["Twitter"] = re.compile(r"""<meta[^>]+name=["']twitter:""", re.I)
    return patterns


def find_missing_markers(html: str, patterns: Dict[str, Pattern]) -> List[str]:
    return [name for name, pattern in patterns.items() if not pattern.search(html)]


class SeoTagCheck(SiteCheck):
    """Canonical, hreflang (each locale + default), Open Graph and Twitter card presence."""

    title = "SEO tags"
    unit = "page(s) incomplete"

    def run(self) -> List[SeoIssue]:
        patterns = marker_patterns(self.config.locales, self.config.default_locale_marker)
        issues: List[SeoIssue] = []
        for path in self.config.pages:
            url = self.config.page_url(path)
            try:
                html = self.fetch_text(url)
            except requests.exceptions.RequestException as e:
                issues.append(SeoIssue(page=url, issue="fetch-failed", detail=str(e)))
                continue
            missing = find_missing_markers(html, patterns)
            if missing:
                issues.append(SeoIssue(page=url, issue="missing-tags", missing=missing))
        return issues
