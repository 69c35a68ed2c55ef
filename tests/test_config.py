import dataclasses

import pytest

from site_qa import AuditConfig
from site_qa.config import CANONICAL_ORIGIN


class TestAuditConfig:
    """Defaults, overrides and target classification"""

    def test_defaults(self):
        config = AuditConfig()

        assert config.base_url == CANONICAL_ORIGIN
        assert len(config.pages) == 11
        assert config.locales == ("fr", "en")
        assert config.child_sitemaps == ("/sitemap-fr.xml", "/sitemap-en.xml")
        assert config.size_thresholds == {"css": 120 * 1024, "js": 80 * 1024}
        assert config.request_timeout == 15.0
        assert config.link_table_limit == 500

    def test_is_immutable(self):
        config = AuditConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.base_url = "https://example.com"

    def test_size_thresholds_are_read_only(self):
        source = {"css": 1, "js": 2}
        config = AuditConfig(size_thresholds=source)
        source["js"] = 999

        assert config.size_thresholds["js"] == 2
        with pytest.raises(TypeError):
            config.size_thresholds["js"] = 10

    def test_page_url_is_absolute_under_base(self):
        config = AuditConfig(base_url="https://preview.example.com/")

        assert config.base_url == "https://preview.example.com"
        assert config.page_url("/") == "https://preview.example.com/"
        assert config.page_url("/en/") == "https://preview.example.com/en/"
        assert config.page_url("blog.html") == "https://preview.example.com/blog.html"

    @pytest.mark.parametrize("bad", ["", "not a url", "ftp://example.com"])
    def test_invalid_base_url(self, bad):
        with pytest.raises(ValueError):
            AuditConfig(base_url=bad)

    def test_local_and_preview_detection(self):
        assert AuditConfig(base_url="http://localhost:8888").is_local_target
        assert AuditConfig(base_url="http://127.0.0.1:5500").is_local_target
        assert not AuditConfig().is_local_target

        preview = AuditConfig(base_url="https://deploy-preview-12--creativeai-tools.netlify.app")
        assert preview.is_preview_target
        assert not preview.is_local_target
        assert not AuditConfig().is_preview_target

    def test_from_dict(self):
        config = AuditConfig.from_dict({
            "SiteAudit": {"size_thresholds": {"js": 1000}, "header_client": "curl", "parallel_sweeps": True},
            "Global": {"request_timeout": 5, "debug": True},
        }, base_url="http://localhost:3000/")

        assert config.base_url == "http://localhost:3000"
        assert config.size_thresholds == {"css": 120 * 1024, "js": 1000}
        assert config.header_client == "curl"
        assert config.parallel_sweeps is True
        assert config.request_timeout == 5.0
        assert config.debug is True

    def test_from_dict_rejects_unknown_header_client(self):
        with pytest.raises(ValueError):
            AuditConfig.from_dict({"SiteAudit": {"header_client": "wget"}})
