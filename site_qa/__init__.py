"""Pre-deployment QA checks for the creativeai-tools marketing site.

`SiteAudit` runs the link, SEO tag, sitemap, robots.txt, security header
and static size sweeps and `render_report` turns the findings into Markdown.
"""

from .config import AuditConfig
from .audit import SiteAudit, AuditResult, run_audit
from .report import render_report, write_report
