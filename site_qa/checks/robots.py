from __future__ import annotations

from typing import List
import re

import requests

from ..base_module import SiteCheck
from ..issues import FileIssue

DISALLOW_RE = re.compile(r"Disallow:\s*(\S+)", re.I)


def advertises_sitemap(robots_text: str, sitemap_url: str) -> bool:
    return bool(re.search(r"Sitemap:\s*" + re.escape(sitemap_url), robots_text, re.I))


def disallowed_paths(robots_text: str) -> List[str]:
    return DISALLOW_RE.findall(robots_text)


def blocks_locale_root(robots_text: str, locale_root: str) -> bool:
    """True only for an exact Disallow on the locale root, with or without trailing slash."""
    root = "/" + locale_root.strip("/")
    return any(path in (root, root + "/") for path in disallowed_paths(robots_text))


class RobotsCheck(SiteCheck):
    title = "robots.txt"
    unit = "issue(s)"

    def run(self) -> List[FileIssue]:
        url = self.config.page_url("/robots.txt")
        try:
            text = self.fetch_text(url)
        except requests.exceptions.RequestException as e:
            return [FileIssue(file=url, issue="fetch-failed", detail=str(e))]

        issues = []
        sitemap_url = self.config.canonical_origin + "/" + self.config.sitemap_index.lstrip("/")
        if not advertises_sitemap(text, sitemap_url):
            issues.append(FileIssue(file=url, issue="robots-missing-sitemap"))
        if blocks_locale_root(text, self.config.secondary_locale_root):
            issues.append(FileIssue(file=url, issue=f"robots-disallow-{self.config.secondary_locale}"))
        return issues
