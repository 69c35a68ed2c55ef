from __future__ import annotations

from typing import List, Optional
import re

import requests

from ..base_module import SiteCheck
from ..issues import FileIssue

LOC_RE = re.compile(r"<loc>([^<]+)</loc>")


def extract_locations(xml_text: str) -> List[str]:
    return [m.group(1) for m in LOC_RE.finditer(xml_text)]


def non_canonical_locations(locations: List[str], canonical_origin: str) -> List[str]:
    prefix = canonical_origin.rstrip("/") + "/"
    return [loc for loc in locations if not loc.startswith(prefix)]


def missing_children(index_text: str, children: List[str]) -> List[str]:
    missing = []
    for child in children:
        name = child.rsplit("/", 1)[-1]
        if not re.search(re.escape(name), index_text, re.I):
            missing.append(name)
    return missing


class SitemapCheck(SiteCheck):
    """Sitemap index references each locale sitemap; child sitemaps only list canonical URLs."""

    title = "sitemaps"
    unit = "problem(s)"

    def fetch_sitemap(self, url: str, problems: List[FileIssue]) -> Optional[str]:
        """Body of the sitemap, or None after recording why it could not be read."""
        try:
            resp = self.fetch_with_retry(url, method="GET")
        except requests.exceptions.RequestException as e:
            problems.append(FileIssue(file=url, issue="fetch-failed", detail=str(e)))
            return None
        if not 200 <= resp.status_code < 300:
            problems.append(FileIssue(file=url, issue="fetch-failed", detail=f"HTTP {resp.status_code}"))
            return None
        return resp.text

    def run(self) -> List[FileIssue]:
        problems: List[FileIssue] = []

        idx_url = self.config.page_url(self.config.sitemap_index)
        idx_body = self.fetch_sitemap(idx_url, problems)
        if idx_body is not None:
            absent = missing_children(idx_body, list(self.config.child_sitemaps))
            if absent:
                problems.append(FileIssue(file=idx_url, issue="index-missing-children", bad=absent))

        for child in self.config.child_sitemaps:
            url = self.config.page_url(child)
            body = self.fetch_sitemap(url, problems)
            if body is None:
                continue
            locations = extract_locations(body)
            self.debug(f"{url}: {len(locations)} location(s)")
            bad = non_canonical_locations(locations, self.config.canonical_origin)
            if bad:
                problems.append(FileIssue(file=url, issue="non-canonical-urls", bad=bad))

        return problems
