"""Tests for the citation resolution cascade.

Provider clients are replaced with AsyncMocks; the page client used for
neutral citation checks is served by httpx.MockTransport.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from casekit_citations.models.citation import ResolvedCandidate
from casekit_citations.services.citation.resolver import (
    TRANSITIONS,
    CitationResolver,
    ResolutionStage,
)
from support import bailii_judgment_page, fcl_judgment_page, make_client

TRADITIONAL = "Smith v Jones [2019] 1 WLR 100"


def candidate(
    url: str, confidence: float, method: str, title: str | None = None
) -> ResolvedCandidate:
    source = "find_case_law" if "nationalarchives" in url else "bailii"
    return ResolvedCandidate(
        url=url, source=source, confidence=confidence, title=title, resolution_method=method
    )


def make_bailii(
    finder: ResolvedCandidate | None = None,
    title: list[ResolvedCandidate] | None = None,
    fulltext: list[ResolvedCandidate] | None = None,
) -> MagicMock:
    bailii = MagicMock()
    bailii.find_by_citation = AsyncMock(return_value=finder)
    bailii.search_by_title = AsyncMock(return_value=title or [])
    bailii.search_fulltext = AsyncMock(return_value=fulltext or [])
    return bailii


def make_fcl(*results: list[ResolvedCandidate]) -> MagicMock:
    fcl = MagicMock()
    fcl.search = AsyncMock(side_effect=list(results) if results else None, return_value=[])
    return fcl


def unreachable(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected page request: {request.url}")


class TestStateMachine:
    def test_transitions_visit_every_stage_once(self) -> None:
        stage = ResolutionStage.START
        visited = []
        while stage is not ResolutionStage.DONE:
            stage = TRANSITIONS[stage]
            visited.append(stage)

        assert visited == [
            ResolutionStage.NEUTRAL_CITATION,
            ResolutionStage.CITATION_FINDER,
            ResolutionStage.TITLE_SEARCH,
            ResolutionStage.FCL_SEARCH,
            ResolutionStage.FCL_CITATION_SEARCH,
            ResolutionStage.FULL_TEXT_SEARCH,
            ResolutionStage.DONE,
        ]


class TestNeutralCitation:
    @pytest.mark.asyncio
    async def test_verified_urls_short_circuit(self, counting_pacer) -> None:
        """Given: A UKSC citation whose BAILII and FCL pages both exist
        When: Resolved
        Then: Both constructed URLs are returned and no search runs
        """

        def pages(request: httpx.Request) -> httpx.Response:
            if request.url.host == "www.bailii.org":
                return httpx.Response(200, text=bailii_judgment_page())
            return httpx.Response(200, text=fcl_judgment_page())

        bailii, fcl = make_bailii(), make_fcl()
        async with make_client(pages) as page_client:
            resolver = CitationResolver(bailii, fcl, page_client, pacer=counting_pacer)
            result = await resolver.resolve("Patel v Mirza [2016] UKSC 42")

        assert result.status == "resolved"
        assert result.case_name == "Patel v Mirza"
        assert [(c.url, c.confidence, c.resolution_method) for c in result.candidates] == [
            ("https://www.bailii.org/uk/cases/UKSC/2016/42.html", 0.95, "neutral_citation_bailii"),
            ("https://caselaw.nationalarchives.gov.uk/uksc/2016/42", 0.90, "neutral_citation_fcl"),
        ]
        assert result.candidates[0].title == "Patel v Mirza [2016] UKSC 42 (20 July 2016)"
        assert result.attempts_log == [
            "Strategy 1: Neutral citation matched (UKSC)",
            "  → BAILII URL verified: https://www.bailii.org/uk/cases/UKSC/2016/42.html",
            "  → FCL URL verified: https://caselaw.nationalarchives.gov.uk/uksc/2016/42",
        ]
        bailii.find_by_citation.assert_not_awaited()
        fcl.search.assert_not_awaited()
        assert counting_pacer.calls == 1

    @pytest.mark.asyncio
    async def test_unverified_urls_fall_through_to_finder(self, pacer) -> None:
        found = candidate(
            "https://www.bailii.org/uk/cases/UKSC/2016/42.html", 0.95, "bailii_citation_finder"
        )
        bailii = make_bailii(finder=found)

        async with make_client(lambda r: httpx.Response(404)) as page_client:
            resolver = CitationResolver(bailii, make_fcl(), page_client, pacer=pacer)
            result = await resolver.resolve("[2016] UKSC 42")

        assert result.status == "resolved"
        assert result.candidates == [found]
        assert result.attempts_log == [
            "Strategy 1: Neutral citation matched (UKSC)",
            "  → BAILII URL not found: https://www.bailii.org/uk/cases/UKSC/2016/42.html",
            "  → FCL URL not found: https://caselaw.nationalarchives.gov.uk/uksc/2016/42",
            "Strategy 2: BAILII citation finder",
            "  → Found via 302 redirect: https://www.bailii.org/uk/cases/UKSC/2016/42.html",
        ]
        bailii.find_by_citation.assert_awaited_once_with("[2016] UKSC 42")

    @pytest.mark.asyncio
    async def test_only_verified_url_is_kept(self, pacer) -> None:
        """Given: A UKSC citation whose BAILII page is missing but FCL page exists
        When: Resolved
        Then: Only the FCL URL is returned and the citation finder is never asked
        """

        def pages(request: httpx.Request) -> httpx.Response:
            if request.url.host == "www.bailii.org":
                return httpx.Response(404)
            return httpx.Response(200, text=fcl_judgment_page())

        bailii, fcl = make_bailii(), make_fcl()
        async with make_client(pages) as page_client:
            resolver = CitationResolver(bailii, fcl, page_client, pacer=pacer)
            result = await resolver.resolve("[2016] UKSC 42")

        assert result.status == "resolved"
        assert [(c.url, c.confidence, c.resolution_method) for c in result.candidates] == [
            ("https://caselaw.nationalarchives.gov.uk/uksc/2016/42", 0.90, "neutral_citation_fcl"),
        ]
        assert result.attempts_log == [
            "Strategy 1: Neutral citation matched (UKSC)",
            "  → BAILII URL not found: https://www.bailii.org/uk/cases/UKSC/2016/42.html",
            "  → FCL URL verified: https://caselaw.nationalarchives.gov.uk/uksc/2016/42",
        ]
        bailii.find_by_citation.assert_not_awaited()
        fcl.search.assert_not_awaited()


class TestSearchStrategies:
    @pytest.mark.asyncio
    async def test_title_search_returns_without_ranking(self, pacer) -> None:
        """Given: A traditional citation and a title search with titled and untitled hits
        When: Resolved
        Then: Title results come back as found, confidence untouched
        """
        titled = candidate(
            "https://www.bailii.org/ew/cases/EWCA/Civ/2019/7.html", 0.80, "bailii_title_search",
            "Smith v Jones",
        )
        untitled = candidate(
            "https://www.bailii.org/ew/cases/EWHC/QB/2017/3.html", 0.70, "bailii_title_search"
        )
        bailii = make_bailii(title=[titled, untitled])
        fcl = make_fcl()

        async with make_client(lambda r: httpx.Response(404)) as page_client:
            resolver = CitationResolver(bailii, fcl, page_client, pacer=pacer)
            result = await resolver.resolve("Smith v Jones [2019] EWCA Civ 7")

        assert result.status == "resolved"
        assert [(c.url, c.confidence) for c in result.candidates] == [
            (titled.url, 0.80),
            (untitled.url, 0.70),
        ]
        assert result.attempts_log[-1] == "  → Found 2 result(s)"
        bailii.search_by_title.assert_awaited_once_with("smith jones")
        fcl.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fcl_party_search(self, pacer) -> None:
        hit = candidate(
            "https://caselaw.nationalarchives.gov.uk/ewca/civ/2019/7", 0.75, "fcl_atom_search"
        )
        fcl = make_fcl([hit])

        async with make_client(unreachable) as page_client:
            result = await CitationResolver(make_bailii(), fcl, page_client, pacer=pacer).resolve(
                TRADITIONAL
            )

        assert result.candidates == [hit]
        assert "Strategy 4: FCL Atom search for: smith jones" in result.attempts_log
        assert "  → Found 1 FCL result(s)" in result.attempts_log
        fcl.search.assert_awaited_once_with("smith jones")

    @pytest.mark.asyncio
    async def test_unresolvable_logs_every_attempt(self, counting_pacer) -> None:
        bailii, fcl = make_bailii(), make_fcl()

        async with make_client(unreachable) as page_client:
            resolver = CitationResolver(bailii, fcl, page_client, pacer=counting_pacer)
            result = await resolver.resolve(TRADITIONAL)

        assert result.status == "unresolvable"
        assert result.candidates == []
        assert result.attempts_log == [
            "Strategy 1: No neutral citation pattern matched",
            "Strategy 2: BAILII citation finder",
            "  → No redirect (citation not recognised)",
            "Strategy 3: BAILII title search for: smith jones",
            "  → No title search results",
            "Strategy 4: FCL Atom search for: smith jones",
            "  → No FCL results",
            "Strategy 5: BAILII full-text search for: smith jones 2019",
            "  → No full-text results",
        ]
        bailii.search_fulltext.assert_awaited_once_with("smith jones 2019")
        # four network calls, three pauses between them
        assert counting_pacer.calls == 3

    @pytest.mark.asyncio
    async def test_citation_only_search_ranks_before_returning(self, pacer) -> None:
        """Given: No case name and FCL hits for the raw citation text
        When: Resolved
        Then: Party searches are skipped and the FCL hits are year-ranked
        """
        other_year = candidate(
            "https://caselaw.nationalarchives.gov.uk/ewhc/ch/2017/4", 0.75, "fcl_atom_search"
        )
        cited_year = candidate(
            "https://caselaw.nationalarchives.gov.uk/ewca/civ/2019/7", 0.75, "fcl_atom_search"
        )
        bailii = make_bailii()
        fcl = make_fcl([other_year, cited_year])

        async with make_client(unreachable) as page_client:
            result = await CitationResolver(bailii, fcl, page_client, pacer=pacer).resolve(
                "[2019] 1 WLR 100"
            )

        assert result.case_name is None
        assert [c.url for c in result.candidates] == [cited_year.url, other_year.url]
        assert result.candidates[0].confidence == pytest.approx(0.95)
        assert result.candidates[1].confidence == pytest.approx(0.225)
        assert "Strategy 4b: FCL search by citation text" in result.attempts_log
        bailii.search_by_title.assert_not_awaited()
        fcl.search.assert_awaited_once_with("[2019] 1 WLR 100")

    @pytest.mark.asyncio
    async def test_full_text_results_are_deduplicated_and_ranked(self, pacer) -> None:
        stale = candidate(
            "https://www.bailii.org/ew/cases/EWHC/QB/2015/9.html", 0.60, "bailii_fulltext_search"
        )
        cited = candidate(
            "https://www.bailii.org/ew/cases/EWCA/Civ/2019/7.html", 0.60, "bailii_fulltext_search"
        )
        bailii = make_bailii(fulltext=[stale, cited, stale])

        async with make_client(unreachable) as page_client:
            result = await CitationResolver(bailii, make_fcl(), page_client, pacer=pacer).resolve(
                TRADITIONAL
            )

        assert result.status == "resolved"
        assert [c.url for c in result.candidates] == [cited.url, stale.url]
        assert result.candidates[0].confidence == pytest.approx(0.80)
        assert result.candidates[1].confidence == pytest.approx(0.18)

    @pytest.mark.asyncio
    async def test_explicit_case_name_wins_over_extraction(self, pacer) -> None:
        bailii, fcl = make_bailii(), make_fcl()

        async with make_client(unreachable) as page_client:
            result = await CitationResolver(bailii, fcl, page_client, pacer=pacer).resolve(
                "[2019] 1 WLR 100", "Caparo Industries plc v Dickman"
            )

        assert result.case_name == "Caparo Industries plc v Dickman"
        bailii.search_by_title.assert_awaited_once_with("caparo industries dickman")
        assert "Strategy 4b: FCL search by citation text" not in result.attempts_log
        bailii.search_fulltext.assert_awaited_once_with("caparo industries dickman 2019")

    @pytest.mark.asyncio
    async def test_attempts_log_is_a_copy(self, pacer) -> None:
        async with make_client(unreachable) as page_client:
            resolver = CitationResolver(make_bailii(), make_fcl(), page_client, pacer=pacer)
            first = await resolver.resolve(TRADITIONAL)
            second = await resolver.resolve(TRADITIONAL)

        assert first.attempts_log == second.attempts_log
        assert first.attempts_log is not second.attempts_log
