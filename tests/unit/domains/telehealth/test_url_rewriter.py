"""
Unit tests for UrlRewriter (internal backend host -> public URL).
"""

import pytest

from app.domains.telehealth.domain.exceptions import ConfigurationMissing
from app.domains.telehealth.infrastructure.external.telesalud import UrlRewriter


@pytest.fixture
def rewriter():
    return UrlRewriter(
        "telesalud-api",
        public_https_url="https://tele.example.org:443/",
        public_http_url="http://tele.example.org",
    )


@pytest.mark.unit
class TestUrlRewriter:
    def test_rewrites_https_and_drops_port(self, rewriter):
        assert (
            rewriter.rewrite("https://telesalud-api:8443/videoconsultation?id=1")
            == "https://tele.example.org/videoconsultation?id=1"
        )

    def test_rewrites_http_keeping_scheme(self, rewriter):
        assert rewriter.rewrite("http://telesalud-api/x") == "http://tele.example.org/x"

    def test_schemeless_mention(self, rewriter):
        assert rewriter.rewrite("join at telesalud-api:8080/room") == "join at tele.example.org/room"

    def test_nested_structures_are_copied(self, rewriter):
        payload = {
            "data": {
                "medic_url": "https://telesalud-api/vc?medic=1",
                "links": ["http://telesalud-api/a", 42, None],
            },
            "success": True,
        }

        result = rewriter.rewrite(payload)

        assert result["data"]["medic_url"] == "https://tele.example.org/vc?medic=1"
        assert result["data"]["links"] == ["http://tele.example.org/a", 42, None]
        assert result["success"] is True
        assert payload["data"]["medic_url"] == "https://telesalud-api/vc?medic=1"

    def test_similar_hosts_untouched(self, rewriter):
        text = "https://telesalud-api-v2/x https://my-telesalud-api/y https://telesalud-api.example.com/z"
        assert rewriter.rewrite(text) == text

    def test_rewritten_output_is_stable(self, rewriter):
        once = rewriter.rewrite("https://telesalud-api/vc")
        assert rewriter.rewrite(once) == once

    def test_https_falls_back_to_http_public_url(self):
        rewriter = UrlRewriter("backend", public_http_url="http://public.example.org")
        assert rewriter.rewrite("https://backend/x") == "https://public.example.org/x"

    def test_internal_host_without_public_url_raises(self):
        rewriter = UrlRewriter("backend")

        assert not rewriter.is_complete
        with pytest.raises(ConfigurationMissing) as exc_info:
            rewriter.rewrite("https://backend/x")
        assert exc_info.value.details["setting"] == "TELESALUD_PUBLIC_HTTPS_URL"

    def test_no_internal_host_leaves_values_alone(self):
        rewriter = UrlRewriter(None)

        assert rewriter.is_complete
        assert rewriter.rewrite({"url": "https://backend/x"}) == {"url": "https://backend/x"}


@pytest.mark.unit
class TestUrlRewriterEncodedForms:
    @pytest.fixture
    def rewriter(self):
        return UrlRewriter("internal-host", public_https_url="https://public.example")

    def test_percent_encoded_url_stays_encoded(self, rewriter):
        value = "https://public.example/login?redirect=https%3A%2F%2Finternal-host%2Fx"

        assert rewriter.rewrite(value) == "https://public.example/login?redirect=https%3A%2F%2Fpublic.example%2Fx"

    def test_percent_encoded_port_is_dropped(self, rewriter):
        value = "next=https%3A%2F%2Finternal-host%3A8443%2Fvc"

        assert rewriter.rewrite(value) == "next=https%3A%2F%2Fpublic.example%2Fvc"

    def test_schemeless_after_encoded_slash(self, rewriter):
        assert rewriter.rewrite("path=%2Finternal-host%2Fvc") == "path=%2Fpublic.example%2Fvc"

    def test_underscore_prefixed_host(self, rewriter):
        assert rewriter.rewrite("host_internal-host") == "host_public.example"

    def test_no_internal_host_survives_nested_payload(self, rewriter):
        payload = {
            "data": {
                "medic_url": "https://internal-host:8443/vc?medic=1",
                "return": "https://public.example/r?to=http%3A%2F%2Finternal-host%2Fdone",
                "notes": ["seen on host_internal-host", "internal-host:80/status"],
            }
        }

        result = rewriter.rewrite(payload)

        assert "internal-host" not in repr(result)
        assert result["data"]["return"] == "https://public.example/r?to=http%3A%2F%2Fpublic.example%2Fdone"
