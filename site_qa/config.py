from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urlparse

CANONICAL_ORIGIN = "https://www.creativeai-tools.fr"

DEFAULT_PAGES = (
    "/", "/blog.html", "/blog-Invideo.html",
    "/mentions-legales.html", "/politique-de-confidentialite.html",
    "/en/", "/en/blog.html", "/en/blog-Invideo.html",
    "/en/legal-notice.html", "/en/privacy-policy.html",
    "/404.html",
)

DEFAULT_REQUIRED_HEADERS = (
    "Content-Security-Policy",
    "Strict-Transport-Security",
    "Referrer-Policy",
    "Permissions-Policy",
    "X-Frame-Options",
    "X-Content-Type-Options",
)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SiteQA/1.0; +https://www.creativeai-tools.fr)"


def _as_tuple(value, default):
    if value is None:
        return tuple(default)
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True)
class AuditConfig:
    """
    Immutable settings for one auditor run.

    Built once (usually via `from_dict`) and handed to every sweep.
    """
    base_url: str = CANONICAL_ORIGIN
    canonical_origin: str = CANONICAL_ORIGIN
    site_name: str = "creativeai-tools"
    pages: Tuple[str, ...] = DEFAULT_PAGES
    locales: Tuple[str, ...] = ("fr", "en")
    default_locale_marker: str = "x-default"
    secondary_locale: str = "en"
    sitemap_index: str = "/sitemap.xml"
    header_paths: Tuple[str, ...] = ("/", "/en/")
    required_headers: Tuple[str, ...] = DEFAULT_REQUIRED_HEADERS
    header_client: str = "requests"  # requests | curl
    header_sample_lines: int = 12
    preview_host_suffixes: Tuple[str, ...] = (".netlify.app",)
    local_hosts: Tuple[str, ...] = ("localhost", "127.0.0.1", "::1")
    assets_root: str = "."
    assets: Tuple[Tuple[str, str], ...] = (("assets/styles.css", "css"), ("assets/main.js", "js"))
    size_thresholds: Mapping[str, int] = field(default_factory=lambda: {"css": 120 * 1024, "js": 80 * 1024})
    request_timeout: float = 15.0
    http_retries: int = 2
    retry_backoff: float = 0.25
    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = "fr-FR,fr;q=0.9,en;q=0.8"
    report_path: str = "reports/qa_report.md"
    link_table_limit: int = 500
    parallel_sweeps: bool = False
    workers: int = 6
    debug: bool = False

    def __post_init__(self):
        base = normalize_base_url(self.base_url)
        object.__setattr__(self, "base_url", base)
        object.__setattr__(self, "canonical_origin", self.canonical_origin.rstrip("/"))
        object.__setattr__(self, "size_thresholds", MappingProxyType(dict(self.size_thresholds)))
        if self.header_client not in ("requests", "curl"):
            raise ValueError(f"Unknown header client: {self.header_client}")
        if self.http_retries < 0:
            raise ValueError("http_retries must be >= 0")

    @classmethod
    def from_dict(cls, app_config: Optional[Dict[str, Any]] = None, base_url: Optional[str] = None) -> "AuditConfig":
        """
        Builds the config from the nested app config used by the CLI and API
        (`SiteAudit` and `Global` sections). An explicit `base_url` wins over
        the one in the dict.
        """
        app_config = app_config or {}
        audit_cfg = app_config.get("SiteAudit", {})
        global_cfg = app_config.get("Global", {})

        thresholds = {"css": 120 * 1024, "js": 80 * 1024}
        thresholds.update({k: int(v) for k, v in (audit_cfg.get("size_thresholds") or {}).items()})
        assets = audit_cfg.get("assets")
        if assets is not None:
            assets = tuple((a[0], a[1]) if not isinstance(a, dict) else (a["path"], a["type"]) for a in assets)
        else:
            assets = (("assets/styles.css", "css"), ("assets/main.js", "js"))

        return cls(
            base_url=base_url or audit_cfg.get("base_url") or CANONICAL_ORIGIN,
            canonical_origin=audit_cfg.get("canonical_origin", CANONICAL_ORIGIN),
            site_name=audit_cfg.get("site_name", "creativeai-tools"),
            pages=_as_tuple(audit_cfg.get("pages"), DEFAULT_PAGES),
            locales=_as_tuple(audit_cfg.get("locales"), ("fr", "en")),
            default_locale_marker=audit_cfg.get("default_locale_marker", "x-default"),
            secondary_locale=audit_cfg.get("secondary_locale", "en"),
            sitemap_index=audit_cfg.get("sitemap_index", "/sitemap.xml"),
            header_paths=_as_tuple(audit_cfg.get("header_paths"), ("/", "/en/")),
            required_headers=_as_tuple(audit_cfg.get("required_headers"), DEFAULT_REQUIRED_HEADERS),
            header_client=audit_cfg.get("header_client", "requests"),
            header_sample_lines=int(audit_cfg.get("header_sample_lines", 12)),
            preview_host_suffixes=_as_tuple(audit_cfg.get("preview_host_suffixes"), (".netlify.app",)),
            local_hosts=_as_tuple(audit_cfg.get("local_hosts"), ("localhost", "127.0.0.1", "::1")),
            assets_root=audit_cfg.get("assets_root", "."),
            assets=assets,
            size_thresholds=thresholds,
            request_timeout=float(global_cfg.get("request_timeout", 15)),
            http_retries=int(global_cfg.get("http_retries", 2)),
            retry_backoff=float(global_cfg.get("retry_backoff", 0.25)),
            user_agent=global_cfg.get("user_agent", DEFAULT_USER_AGENT),
            accept_language=global_cfg.get("accept_language", "fr-FR,fr;q=0.9,en;q=0.8"),
            report_path=audit_cfg.get("report_path", "reports/qa_report.md"),
            link_table_limit=int(audit_cfg.get("link_table_limit", 500)),
            parallel_sweeps=bool(audit_cfg.get("parallel_sweeps", False)),
            workers=int(audit_cfg.get("workers", 6)),
            debug=bool(global_cfg.get("debug", False)),
        )

    def page_url(self, path: str) -> str:
        return self.base_url + "/" + path.lstrip("/")

    @property
    def hostname(self) -> str:
        return (urlparse(self.base_url).hostname or "").lower()

    @property
    def is_local_target(self) -> bool:
        return self.hostname in self.local_hosts

    @property
    def is_preview_target(self) -> bool:
        return any(self.hostname.endswith(suffix) for suffix in self.preview_host_suffixes)

    @property
    def secondary_locale_root(self) -> str:
        return f"/{self.secondary_locale}/"

    @property
    def child_sitemaps(self) -> Tuple[str, ...]:
        return tuple(f"/sitemap-{locale}.xml" for locale in self.locales)


def normalize_base_url(url: str) -> str:
    if not url:
        raise ValueError("Base URL must not be empty")
    url = url.strip().rstrip("/")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Invalid base URL provided: {url}")
    return url
