from __future__ import annotations

import csv
import json
import os
from typing import Any, Dict


def export_json(path: str, findings: Dict[str, Any]):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(findings, f, indent=2, ensure_ascii=False)


def export_links_csv(path: str, link_issues):
    fieldnames = ['page', 'link', 'type', 'status', 'status_text', 'error']
    with open(path, 'w', newline='', encoding='utf-8') as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for i in link_issues:
            w.writerow({k: getattr(i, k) for k in fieldnames})


def export_issues_csv(path: str, result):
    """One row per non-link finding, flattened across sweeps."""
    fieldnames = ['sweep', 'target', 'issue', 'details']
    with open(path, 'w', newline='', encoding='utf-8') as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for i in result.seo_issues:
            w.writerow({'sweep': 'seo', 'target': i.page, 'issue': i.issue,
                        'details': ", ".join(i.missing) if i.missing else (i.detail or '')})
        for sweep, items in (('sitemaps', result.sitemap_issues), ('robots', result.robots_issues)):
            for i in items:
                w.writerow({'sweep': sweep, 'target': i.file, 'issue': i.issue,
                            'details': ", ".join(i.bad) if i.bad else (i.detail or '')})
        for i in result.header_findings:
            if i.missing:
                w.writerow({'sweep': 'headers', 'target': i.url, 'issue': 'missing-headers',
                            'details': ", ".join(i.missing)})
        for i in result.static_sizes:
            if i.missing:
                w.writerow({'sweep': 'sizes', 'target': i.file, 'issue': 'file-not-found', 'details': ''})
            elif not i.ok:
                w.writerow({'sweep': 'sizes', 'target': i.file, 'issue': 'over-limit',
                            'details': f"{i.size} > {i.limit}"})


def export_csv_dir(directory: str, result) -> Dict[str, str]:
    os.makedirs(directory, exist_ok=True)
    paths = {
        'links_csv': os.path.join(directory, 'links.csv'),
        'issues_csv': os.path.join(directory, 'issues.csv'),
    }
    export_links_csv(paths['links_csv'], result.link_issues)
    export_issues_csv(paths['issues_csv'], result)
    return paths
