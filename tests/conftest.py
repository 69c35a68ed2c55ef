"""
Shared fixtures for the QA checker tests.

`FakeSession` stands in for `requests.Session`: routes map a URL (or a
`(METHOD, URL)` pair) to a `FakeResponse`, an exception instance, or a list
of those consumed one per call.
"""

from types import SimpleNamespace

import pytest
from requests.structures import CaseInsensitiveDict

from site_qa import AuditConfig

CANONICAL = "https://www.creativeai-tools.fr"

REASONS = {200: "OK", 301: "Moved Permanently", 404: "Not Found", 405: "Method Not Allowed", 500: "Internal Server Error"}

SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'",
    "Strict-Transport-Security": "max-age=31536000",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=()",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
}

FULL_HEAD = """
<link rel="canonical" href="https://www.creativeai-tools.fr/">
<link rel="alternate" hreflang="fr" href="https://www.creativeai-tools.fr/">
<link rel="alternate" hreflang="en" href="https://www.creativeai-tools.fr/en/">
<link rel="alternate" hreflang="x-default" href="https://www.creativeai-tools.fr/">
<meta property="og:title" content="CreativeAI Tools">
<meta name="twitter:card" content="summary_large_image">
"""


class FakeResponse:
    def __init__(self, status_code=200, text="", headers=None, reason=None, history=None, url=""):
        self.status_code = status_code
        self.text = text
        self.headers = CaseInsensitiveDict(headers or {})
        self.reason = reason if reason is not None else REASONS.get(status_code, "")
        self.history = history or []
        self.raw = SimpleNamespace(version=11)
        self.url = url
        self.closed = False

    def close(self):
        self.closed = True


class FakeSession:
    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.headers = {}
        self.calls = []

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append((method, url))
        handler = self.routes.get((method, url), self.routes.get(url))
        if handler is None:
            return FakeResponse(404)
        if isinstance(handler, list):
            handler = handler.pop(0) if len(handler) > 1 else handler[0]
        if isinstance(handler, BaseException):
            raise handler
        return handler

    def methods_for(self, url):
        return [m for m, u in self.calls if u == url]


def page_html(body="", head=FULL_HEAD):
    return f"<!doctype html><html><head>{head}</head><body>{body}</body></html>"


def healthy_routes(base=CANONICAL):
    """A site where every sweep passes."""
    routes = {}
    cfg = AuditConfig(base_url=base)
    for path in cfg.pages:
        routes[cfg.page_url(path)] = FakeResponse(
            200, text=page_html('<a href="/blog.html">Blog</a> <a href="mailto:hi@example.com">Mail</a>'),
            headers=SECURITY_HEADERS,
        )
    routes[f"{base}/sitemap.xml"] = FakeResponse(200, text=(
        "<sitemapindex>"
        f"<sitemap><loc>{CANONICAL}/sitemap-fr.xml</loc></sitemap>"
        f"<sitemap><loc>{CANONICAL}/sitemap-en.xml</loc></sitemap>"
        "</sitemapindex>"
    ))
    routes[f"{base}/sitemap-fr.xml"] = FakeResponse(200, text=f"<urlset><url><loc>{CANONICAL}/</loc></url><url><loc>{CANONICAL}/blog.html</loc></url></urlset>")
    routes[f"{base}/sitemap-en.xml"] = FakeResponse(200, text=f"<urlset><url><loc>{CANONICAL}/en/</loc></url></urlset>")
    routes[f"{base}/robots.txt"] = FakeResponse(200, text=f"User-agent: *\nDisallow: /drafts/\nSitemap: {CANONICAL}/sitemap.xml\n")
    return routes


@pytest.fixture
def assets_dir(tmp_path):
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "styles.css").write_bytes(b"body{margin:0}")
    (tmp_path / "assets" / "main.js").write_bytes(b"console.log(1);")
    return tmp_path


@pytest.fixture
def make_config(assets_dir, tmp_path):
    def _make(**overrides):
        params = {
            "base_url": CANONICAL,
            "assets_root": str(assets_dir),
            "report_path": str(tmp_path / "reports" / "qa_report.md"),
            "retry_backoff": 0.0,
        }
        params.update(overrides)
        return AuditConfig(**params)
    return _make
