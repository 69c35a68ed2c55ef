from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
import os

from ..config import AuditConfig


def fmt_bytes(b) -> str:
    if not isinstance(b, int):
        return "—"
    return f"{b / 1024:.1f} KB"


def _heading(result, index: int, title: str) -> str:
    summaries = getattr(result, "summaries", None) or []
    if index < len(summaries):
        return f"## {title} — {summaries[index].label()}"
    return f"## {title}"


def _links_section(result, config: AuditConfig) -> List[str]:
    lines = [_heading(result, 0, "1) Link checker")]
    issues = result.link_issues
    if not issues:
        lines.append("✅ All checked links on target pages returned 2xx/3xx.")
        return lines
    limit = config.link_table_limit
    lines.append(f"❌ Found {len(issues)} problematic link(s):")
    lines.append("")
    lines.append("| Page | Link | Status/Error |")
    lines.append("|------|------|--------------|")
    for it in issues[:limit]:
        lines.append(f"| {it.page} | {it.link or '—'} | {it.status_label()} |")
    if len(issues) > limit:
        lines.append(f"_…and {len(issues) - limit} more_")
    return lines


def _seo_section(result, config: AuditConfig) -> List[str]:
    markers = "/".join(loc.upper() for loc in config.locales)
    lines = [_heading(result, 1, f"2) SEO tags (canonical, hreflang {markers}/{config.default_locale_marker}, OG, Twitter)")]
    if not result.seo_issues:
        lines.append("✅ All pages include the required tags.")
        return lines
    lines.append(f"❌ {len(result.seo_issues)} page(s) incomplete:")
    for it in result.seo_issues:
        if it.issue == "fetch-failed":
            lines.append(f"- {it.page}: fetch failed → {it.detail}")
        else:
            lines.append(f"- {it.page}: missing → {', '.join(it.missing)}")
    return lines


def _file_issue_line(it) -> str:
    line = f"- {it.file}: {it.issue}"
    if it.bad:
        line += f" → {', '.join(it.bad)}"
    elif it.detail:
        line += f" → {it.detail}"
    return line


def _sitemaps_section(result, config: AuditConfig) -> List[str]:
    lines = [_heading(result, 2, "3) Sitemaps")]
    if not result.sitemap_issues:
        children = " & ".join(f"**{c.lstrip('/')}**" for c in config.child_sitemaps)
        lines.append(f"✅ {config.sitemap_index.lstrip('/')} indexes {children} and child sitemaps use canonical absolute URLs.")
        return lines
    lines.append(f"❌ {len(result.sitemap_issues)} problem(s):")
    lines.extend(_file_issue_line(it) for it in result.sitemap_issues)
    return lines


def _robots_section(result, config: AuditConfig) -> List[str]:
    lines = [_heading(result, 3, "4) robots.txt")]
    if not result.robots_issues:
        lines.append(f"✅ robots.txt exposes the sitemap index and does not block **{config.secondary_locale_root}**.")
        return lines
    lines.append(f"❌ {len(result.robots_issues)} issue(s):")
    lines.extend(_file_issue_line(it) for it in result.robots_issues)
    return lines


def _headers_section(result, config: AuditConfig) -> List[str]:
    lines = [_heading(result, 4, "5) Security headers")]
    for it in result.header_findings:
        if not it.missing:
            lines.append(f"✅ {it.url} — all required headers present.")
        else:
            lines.append(f"❌ {it.url} — missing: {', '.join(it.missing)}")
            lines.append(f"<details><summary>Sample headers</summary>\n\n```\n{it.sample.strip()}\n```\n</details>")
    return lines


def _sizes_section(result, config: AuditConfig) -> List[str]:
    lines = [_heading(result, 5, "6) Static sizes (raw bytes)")]
    for it in result.static_sizes:
        if it.missing:
            lines.append(f"- {it.file}: ❌ file not found")
        else:
            status = "✅" if it.ok else "❌"
            lines.append(f"- {it.file}: {status} {fmt_bytes(it.size)} (limit {fmt_bytes(it.limit)})")
    return lines


SECTIONS = (_links_section, _seo_section, _sitemaps_section, _robots_section, _headers_section, _sizes_section)


def render_report(result, config: AuditConfig, generated_at: Optional[datetime] = None) -> str:
    """
    Renders an `AuditResult` as Markdown. The timestamp is the only
    run-dependent text; pass `generated_at` to pin it.
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    lines = [
        f"# QA Report — {config.site_name}",
        f"Base URL checked: **{config.base_url}**",
        f"Generated: {generated_at.isoformat()}",
        "",
    ]
    for section in SECTIONS:
        lines.extend(section(result, config))
        lines.append("")
    lines.append("---")
    lines.append("_Tip:_ use `BASE_URL` to target a preview deploy, e.g.:")
    lines.append(f"`BASE_URL=https://deploy-preview-123--{config.site_name}.netlify.app python app.py`")
    return "\n".join(lines)


def write_report(text: str, path: str) -> str:
    """Writes (overwrites) the report, creating the parent directory if needed."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return os.path.abspath(path)
