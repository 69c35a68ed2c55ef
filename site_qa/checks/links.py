from __future__ import annotations

from typing import List, Optional, Tuple
from urllib.parse import urljoin, urldefrag, urlparse
import re

from bs4 import BeautifulSoup
import requests

from ..base_module import SiteCheck, is_success_status, is_usable_status
from ..issues import LinkIssue

ANCHOR_HREF_RE = re.compile(r"""<a\b[^>]*href\s*=\s*["']([^"']+)["'][^>]*>""", re.I)


def document_base(html: str, page_url: str) -> str:
    """Resolution base for relative links: the document's <base href> if any, else the page URL."""
    try:
        soup = BeautifulSoup(html, 'html.parser')
    except Exception:
        return page_url
    tag = soup.find("base", href=True)
    if tag and tag["href"].strip():
        try:
            return urljoin(page_url, tag["href"].strip())
        except ValueError:
            return page_url
    return page_url


def normalize_link(base: str, href: str) -> Optional[str]:
    """
    Absolute http(s) URL for `href` without its fragment, or None when the
    reference is not fetchable. Raises ValueError for a malformed reference
    such as an unbalanced IPv6 bracket.
    """
    if not href:
        return None
    href = href.strip()
    if href.startswith(('mailto:', 'tel:', 'javascript:', '#')):
        return None
    abs_url, _ = urldefrag(urljoin(base, href))
    if urlparse(abs_url).scheme not in ('http', 'https'):
        return None
    return abs_url


def collect_links(html: str, page_url: str) -> Tuple[List[str], List[Tuple[str, str]]]:
    """Returns the unique fetchable links and the (href, error) pairs that could not be parsed."""
    base = document_base(html, page_url)
    links = []
    malformed = []
    for match in ANCHOR_HREF_RE.finditer(html):
        href = match.group(1)
        try:
            norm = normalize_link(base, href)
        except ValueError as e:
            malformed.append((href.strip(), str(e)))
            continue
        if norm:
            links.append(norm)
    return list(dict.fromkeys(links)), list(dict.fromkeys(malformed))  # dedupe preserve order


def extract_links(html: str, page_url: str) -> List[str]:
    return collect_links(html, page_url)[0]


class LinkCheck(SiteCheck):
    """Fetches every configured page and checks each outbound http(s) link."""

    title = "links"
    unit = "issue(s)"

    def check_link(self, link: str) -> Optional[LinkIssue]:
        resp = None
        head_error = None
        try:
            resp = self.head(link)
        except requests.exceptions.RequestException as e:
            head_error = e

        if resp is None or not is_usable_status(resp.status_code) or resp.status_code >= 400:
            # Some servers reject HEAD
            if resp is not None:
                resp.close()
            try:
                resp = self.get(link, stream=True)
            except requests.exceptions.RequestException as e:
                self.debug(f"{link}: HEAD error {head_error}, GET error {e}")
                return LinkIssue(page="", link=link, error=str(e))

        try:
            if is_success_status(resp.status_code):
                return None
            return LinkIssue(page="", link=link, status=resp.status_code, status_text=resp.reason or "")
        finally:
            resp.close()

    def check_page(self, path: str) -> List[LinkIssue]:
        url = self.config.page_url(path)
        try:
            html = self.fetch_text(url)
        except requests.exceptions.RequestException as e:
            return [LinkIssue(page=url, error=str(e), type="page-fetch-error")]

        issues: List[LinkIssue] = []
        links, malformed = collect_links(html, url)
        for href, error in malformed:
            issues.append(LinkIssue(page=url, link=href, error=f"Malformed URL: {error}"))
        self.debug(f"{url}: {len(links)} link(s)")
        for link in links:
            issue = self.check_link(link)
            if issue:
                issue.page = url
                issues.append(issue)
        return issues

    def run(self) -> List[LinkIssue]:
        results: List[LinkIssue] = []
        for path in self.config.pages:
            results.extend(self.check_page(path))
        return results
