import os
from datetime import datetime, timezone

from site_qa import SiteAudit, render_report, run_audit, write_report
from site_qa.audit import AuditResult
from site_qa.issues import LinkIssue
from site_qa.report.export import export_csv_dir, export_json

from conftest import CANONICAL, FakeResponse, FakeSession, healthy_routes, page_html

PINNED = datetime(2026, 1, 1, tzinfo=timezone.utc)


def run_site(config, routes):
    session = FakeSession(routes)
    result = SiteAudit(config, session_factory=lambda: session).run()
    return result, session


class TestSiteAudit:

    def test_healthy_site(self, make_config, capsys):
        config = make_config()
        result, _ = run_site(config, healthy_routes())
        out = capsys.readouterr().out

        assert [s.ok for s in result.summaries] == [True] * 6
        assert out.count("✅ OK") == 6
        assert "1/6 Checking links… ✅ OK" in out

        report = render_report(result, config, generated_at=PINNED)
        assert report.count("✅ OK") == 6
        assert "❌" not in report
        assert "## 2) SEO tags (canonical, hreflang FR/EN/x-default, OG, Twitter) — ✅ OK" in report
        assert report.index("## 1) Link checker") < report.index("## 2) SEO tags") < report.index("## 3) Sitemaps") \
            < report.index("## 4) robots.txt") < report.index("## 5) Security headers") < report.index("## 6) Static sizes")

    def test_broken_link_scenario(self, make_config, capsys):
        config = make_config(pages=("/",))
        routes = healthy_routes()
        routes[CANONICAL + "/"] = FakeResponse(200, text=page_html('<a href="/gone.html">gone</a>'))
        result, _ = run_site(config, routes)

        assert len(result.link_issues) == 1
        assert result.link_issues[0].link == CANONICAL + "/gone.html"
        report = render_report(result, config, generated_at=PINNED)
        assert f"| {CANONICAL}/ | {CANONICAL}/gone.html | 404 Not Found |" in report
        assert "1/6 Checking links… ❌ 1 issue(s)" in capsys.readouterr().out

    def test_oversized_bundle_only_affects_sizes(self, make_config, assets_dir, capsys):
        (assets_dir / "assets" / "main.js").write_bytes(b"x" * 90 * 1024)
        config = make_config()
        result, _ = run_site(config, healthy_routes())

        assert [s.ok for s in result.summaries] == [True, True, True, True, True, False]
        report = render_report(result, config, generated_at=PINNED)
        assert "- assets/main.js: ❌ 90.0 KB (limit 80.0 KB)" in report

    def test_parallel_keeps_order(self, make_config, capsys):
        config = make_config(parallel_sweeps=True, workers=6)
        result, _ = run_site(config, healthy_routes())
        sequential, _ = run_site(make_config(), healthy_routes())

        assert [s.name for s in result.summaries] == [s.name for s in sequential.summaries]
        assert render_report(result, config, generated_at=PINNED) == render_report(sequential, make_config(), generated_at=PINNED)

    def test_report_is_deterministic(self, make_config, capsys):
        config = make_config()
        first, _ = run_site(config, healthy_routes())
        second, _ = run_site(config, healthy_routes())

        assert render_report(first, config, generated_at=PINNED) == render_report(second, config, generated_at=PINNED)

    def test_run_audit_renders_without_writing(self, make_config, monkeypatch, capsys):
        config = make_config()
        monkeypatch.setattr("site_qa.audit.requests.Session", lambda: FakeSession(healthy_routes()))
        audit = run_audit(config, verbose=False, generated_at=PINNED)

        assert [s.ok for s in audit["result"].summaries] == [True] * 6
        assert audit["markdown"] == render_report(audit["result"], config, generated_at=PINNED)
        assert capsys.readouterr().out == ""
        assert not os.path.exists(config.report_path)


class TestReport:

    def test_link_table_is_truncated(self, make_config):
        config = make_config(link_table_limit=3)
        result = AuditResult(base_url=config.base_url, link_issues=[
            LinkIssue(page=CANONICAL + "/", link=f"{CANONICAL}/{i}.html", status=404, status_text="Not Found")
            for i in range(5)
        ])
        report = render_report(result, config, generated_at=PINNED)

        assert report.count("| 404 Not Found |") == 3
        assert "_…and 2 more_" in report
        assert "❌ Found 5 problematic link(s):" in report

    def test_write_report_overwrites(self, make_config, tmp_path):
        path = str(tmp_path / "out" / "qa_report.md")
        write_report("first", path)
        write_report("second", path)

        with open(path, encoding="utf-8") as f:
            assert f.read() == "second"

    def test_exports(self, make_config, tmp_path, capsys):
        config = make_config(pages=("/",))
        routes = healthy_routes()
        routes[CANONICAL + "/"] = FakeResponse(200, text="<a href='/gone.html'>x</a>")
        result, _ = run_site(config, routes)

        export_json(str(tmp_path / "findings.json"), result.to_dict())
        paths = export_csv_dir(str(tmp_path / "csv"), result)

        links_csv = (tmp_path / "csv" / "links.csv").read_text(encoding="utf-8")
        issues_csv = (tmp_path / "csv" / "issues.csv").read_text(encoding="utf-8")
        assert set(paths) == {"links_csv", "issues_csv"}
        assert "gone.html" in links_csv
        assert "missing-tags" in issues_csv
        assert '"base_url": "https://www.creativeai-tools.fr"' in (tmp_path / "findings.json").read_text(encoding="utf-8")
