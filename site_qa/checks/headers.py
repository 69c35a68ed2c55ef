from __future__ import annotations

from typing import List
import re
import subprocess

import requests

from ..base_module import SiteCheck
from ..issues import HeaderFinding

HSTS = "Strict-Transport-Security"

_HTTP_VERSIONS = {10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2"}


def format_raw_headers(response: requests.Response) -> str:
    """Renders every hop of a redirect chain like `curl -sIL` prints it."""
    blocks = []
    for hop in list(response.history) + [response]:
        version = _HTTP_VERSIONS.get(getattr(hop.raw, "version", None), "HTTP/1.1")
        lines = [f"{version} {hop.status_code} {hop.reason or ''}".rstrip()]
        lines.extend(f"{name}: {value}" for name, value in hop.headers.items())
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


def header_value(raw: str, name: str) -> str:
    match = re.search(r"^" + re.escape(name) + r":[ \t]*(.+)$", raw, re.I | re.M)
    return (match.group(1) or "").strip() if match else ""


def missing_headers(raw: str, required) -> List[str]:
    return [name for name in required if not header_value(raw, name)]


class SecurityHeaderCheck(SiteCheck):
    """
    Required security headers on a few representative paths.

    Preview deploys do not get HSTS; loopback targets are skipped entirely
    since local dev servers do not apply the production header rules.
    """

    title = "security headers"
    unit = "missing set(s)"

    def raw_headers(self, url: str) -> str:
        if self.config.header_client == "curl":
            return self._curl_headers(url)
        try:
            resp = self.head(url)
        except requests.exceptions.RequestException as e:
            self.debug(f"Header fetch failed for {url}: {e}")
            return ""
        try:
            return format_raw_headers(resp)
        finally:
            resp.close()

    def _curl_headers(self, url: str) -> str:
        try:
            proc = subprocess.run(
                ["curl", "-s", "-I", "-L", "--max-time", str(int(self.config.request_timeout)), url],
                capture_output=True, text=True, check=True,
                timeout=self.config.request_timeout + 5,
            )
        except (OSError, subprocess.SubprocessError) as e:
            self.debug(f"curl failed for {url}: {e}")
            return ""
        return proc.stdout

    def required_for_target(self) -> List[str]:
        required = list(self.config.required_headers)
        if self.config.is_preview_target:
            required = [h for h in required if h.lower() != HSTS.lower()]
        return required

    def run(self) -> List[HeaderFinding]:
        if self.config.is_local_target:
            return [HeaderFinding(url=self.config.page_url(p)) for p in self.config.header_paths]

        required = self.required_for_target()
        findings: List[HeaderFinding] = []
        for path in self.config.header_paths:
            url = self.config.page_url(path)
            raw = self.raw_headers(url)
            sample = "\n".join(raw.split("\n")[:self.config.header_sample_lines])
            findings.append(HeaderFinding(url=url, missing=missing_headers(raw, required), sample=sample))
        return findings

    def failure_count(self, results: List[HeaderFinding]) -> int:
        return sum(1 for f in results if f.missing)
