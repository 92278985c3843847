"""Tests for the outbound domain allowlist."""

from __future__ import annotations

import httpx
import pytest

from casekit_citations.core.domain_gate import (
    ensure_domain_allowed,
    gate_request,
    is_domain_allowed,
)
from casekit_citations.core.exceptions import DomainNotAllowedError


class TestIsDomainAllowed:
    """Host matching against the allowlist."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.bailii.org/uk/cases/UKSC/2020/42.html",
            "https://bailii.org/ew/cases/EWCA/Civ/2019/7.html",
            "https://caselaw.nationalarchives.gov.uk/uksc/2020/42",
            "https://www.legislation.gov.uk/ukpga/1998/42",
            "http://legislation.gov.uk/ukpga/1998/42",
            "https://WWW.BAILII.ORG/uk/cases/UKSC/2020/42.html",
        ],
    )
    def test_allowlisted_hosts_pass(self, url: str) -> None:
        assert is_domain_allowed(url) is True

    def test_subdomain_of_allowlisted_host_passes(self) -> None:
        """Given: A subdomain of bailii.org
        When: Checked against the gate
        Then: It is allowed
        """
        assert is_domain_allowed("https://beta.bailii.org/uk/cases/UKSC/2020/42.html")

    @pytest.mark.parametrize(
        "url",
        [
            "https://bailii.org.evil.com/uk/cases/UKSC/2020/42.html",
            "https://evilbailii.org/",
            "https://example.com/?next=https://www.bailii.org/",
            "https://nationalarchives.gov.uk/",
        ],
    )
    def test_lookalike_hosts_are_rejected(self, url: str) -> None:
        assert is_domain_allowed(url) is False

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "not a url",
            "www.bailii.org/uk/cases",
            "ftp://www.bailii.org/x",
            "https://[::1",
            "https://www.bailii.org/uk/cases/UKSC/2020/\x0142.html",
            "https://www.bailii.org/uk/cases/UKSC/2020/42.html\n",
            "https://www.bailii.org:notaport/",
        ],
    )
    def test_malformed_urls_are_rejected(self, url: str) -> None:
        assert is_domain_allowed(url) is False


class TestEnsureDomainAllowed:
    def test_allowed_url_returns_none(self) -> None:
        assert ensure_domain_allowed("https://www.bailii.org/uk/cases/UKSC/2020/42.html") is None

    def test_blocked_url_raises_with_url_attached(self) -> None:
        with pytest.raises(DomainNotAllowedError) as exc_info:
            ensure_domain_allowed("https://example.com/judgment")

        assert exc_info.value.url == "https://example.com/judgment"
        assert "not allowed" in str(exc_info.value)

    def test_blocked_error_is_a_permission_error(self) -> None:
        with pytest.raises(PermissionError):
            ensure_domain_allowed("https://example.com/")


class TestGateRequest:
    @pytest.mark.asyncio
    async def test_allowed_request_passes(self) -> None:
        request = httpx.Request("GET", "https://www.bailii.org/uk/cases/UKSC/2020/42.html")

        assert await gate_request(request) is None

    @pytest.mark.asyncio
    async def test_blocked_request_raises(self) -> None:
        with pytest.raises(DomainNotAllowedError):
            await gate_request(httpx.Request("GET", "https://evil.example/steal"))
