from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List

import requests

from .config import AuditConfig
from .checks import SWEEPS
from .issues import LinkIssue, SeoIssue, FileIssue, HeaderFinding, SizeRecord
from .report import render_report


@dataclass
class SweepSummary:
    name: str
    failures: int
    unit: str

    @property
    def ok(self) -> bool:
        return self.failures == 0

    def label(self) -> str:
        return "✅ OK" if self.ok else f"❌ {self.failures} {self.unit}"


@dataclass
class AuditResult:
    base_url: str
    link_issues: List[LinkIssue] = field(default_factory=list)
    seo_issues: List[SeoIssue] = field(default_factory=list)
    sitemap_issues: List[FileIssue] = field(default_factory=list)
    robots_issues: List[FileIssue] = field(default_factory=list)
    header_findings: List[HeaderFinding] = field(default_factory=list)
    static_sizes: List[SizeRecord] = field(default_factory=list)
    summaries: List[SweepSummary] = field(default_factory=list)

    # Report order; matches SWEEPS
    FIELDS = ("link_issues", "seo_issues", "sitemap_issues", "robots_issues", "header_findings", "static_sizes")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"base_url": self.base_url}
        for name in self.FIELDS:
            data[name] = [r.to_dict() for r in getattr(self, name)]
        data["summary"] = [{"sweep": s.name, "failures": s.failures, "ok": s.ok} for s in self.summaries]
        return data


class SiteAudit:
    """
    Runs the six sweeps in fixed order and collects their records.

    Per-item failures are records; anything a sweep does not handle itself
    escapes `run()`.
    """

    def __init__(self, config: AuditConfig, session_factory=None):
        self.config = config
        self.session_factory = session_factory or requests.Session

    def _build_checks(self):
        return [sweep(self.config, session=self.session_factory()) for sweep in SWEEPS]

    def _progress(self, index: int, total: int, check) -> str:
        return f"{index}/{total} Checking {check.title}… "

    def run(self, verbose: bool = True) -> AuditResult:
        checks = self._build_checks()
        total = len(checks)
        result = AuditResult(base_url=self.config.base_url)
        if verbose:
            print(f"🔎 QA start — Base URL: {self.config.base_url}")

        if self.config.parallel_sweeps:
            with ThreadPoolExecutor(max_workers=max(1, self.config.workers)) as ex:
                futures = [ex.submit(check.run) for check in checks]
                # Collected in submission order so the report layout never depends on timing
                outputs = [fut.result() for fut in futures]
            for i, (check, records) in enumerate(zip(checks, outputs), start=1):
                summary = self._record(result, i - 1, check, records)
                if verbose:
                    print(self._progress(i, total, check) + summary.label())
        else:
            for i, check in enumerate(checks, start=1):
                if verbose:
                    print(self._progress(i, total, check), end="", flush=True)
                records = check.run()
                summary = self._record(result, i - 1, check, records)
                if verbose:
                    print(summary.label())

        return result

    def _record(self, result: AuditResult, index: int, check, records) -> SweepSummary:
        setattr(result, AuditResult.FIELDS[index], records)
        summary = SweepSummary(name=check.title, failures=check.failure_count(records), unit=check.unit)
        result.summaries.append(summary)
        return summary


def run_audit(config: AuditConfig, verbose: bool = True, generated_at=None) -> Dict[str, Any]:
    """Runs the audit and renders the Markdown report without writing it."""
    result = SiteAudit(config).run(verbose=verbose)
    return {"result": result, "markdown": render_report(result, config, generated_at=generated_at)}
