"""Citation resolution cascade.

Resolves a citation to verified judgment URLs by running five strategies in
order of decreasing precision:

    1. Neutral citation -> constructed BAILII / Find Case Law URLs, verified
    2. BAILII citation finder (302 redirect)
    3. BAILII title search on the party names
    4. Find Case Law Atom search on the party names
       (4b: on the raw citation when no case name is available)
    5. BAILII boolean full-text search

The cascade is an explicit state machine. Each stage handler returns a
StrategyOutcome; the loop owns deduplication, termination and ranking.
Stages 1-4b stop the cascade as soon as any candidate has been accumulated.
Stage 5 always finishes with year ranking.

Every attempt and its outcome is appended to the attempts log, which is
never rewritten. The injected pacer runs between every two network calls
made by one resolution.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

import httpx
import structlog

from ...core.pacing import Pacer, RequestPacer
from ...models.citation import (
    CandidateSource,
    CitationResolution,
    ResolutionMethod,
    ResolvedCandidate,
)
from ...utils.citation_text import extract_case_name, extract_party_search_terms, extract_year
from ..providers.bailii_client import BailiiClient
from ..providers.fcl_client import FindCaseLawClient
from .content_validator import check_url
from .neutral_citation import match_neutral_citation
from .ranker import boost_year_matches

logger = structlog.get_logger(__name__)

NEUTRAL_BAILII_CONFIDENCE = 0.95
NEUTRAL_FCL_CONFIDENCE = 0.90


class ResolutionStage(str, Enum):
    """States of the resolution cascade."""

    START = "start"
    NEUTRAL_CITATION = "neutral_citation"
    CITATION_FINDER = "citation_finder"
    TITLE_SEARCH = "title_search"
    FCL_SEARCH = "fcl_search"
    FCL_CITATION_SEARCH = "fcl_citation_search"
    FULL_TEXT_SEARCH = "full_text_search"
    DONE = "done"


TRANSITIONS: dict[ResolutionStage, ResolutionStage] = {
    ResolutionStage.START: ResolutionStage.NEUTRAL_CITATION,
    ResolutionStage.NEUTRAL_CITATION: ResolutionStage.CITATION_FINDER,
    ResolutionStage.CITATION_FINDER: ResolutionStage.TITLE_SEARCH,
    ResolutionStage.TITLE_SEARCH: ResolutionStage.FCL_SEARCH,
    ResolutionStage.FCL_SEARCH: ResolutionStage.FCL_CITATION_SEARCH,
    ResolutionStage.FCL_CITATION_SEARCH: ResolutionStage.FULL_TEXT_SEARCH,
    ResolutionStage.FULL_TEXT_SEARCH: ResolutionStage.DONE,
}


@dataclass
class StrategyOutcome:
    """Result of one stage handler.

    Attributes:
        candidates: Candidates found by the stage (may repeat earlier URLs)
        should_terminate: Stop the cascade if the accumulated set is non-empty
        rank_before_return: Apply year ranking when terminating early
    """

    candidates: list[ResolvedCandidate] = field(default_factory=list)
    should_terminate: bool = False
    rank_before_return: bool = False


@dataclass
class ResolutionRun:
    """Mutable state of a single resolution call."""

    citation: str
    case_name: str | None
    search_terms: list[str]
    candidates: list[ResolvedCandidate] = field(default_factory=list)
    attempts_log: list[str] = field(default_factory=list)
    network_calls: int = 0

    def log(self, entry: str) -> None:
        self.attempts_log.append(entry)

    def merge(self, found: list[ResolvedCandidate]) -> None:
        known = {candidate.url for candidate in self.candidates}
        for candidate in found:
            if candidate.url not in known:
                self.candidates.append(candidate)
                known.add(candidate.url)


StageHandler = Callable[[ResolutionRun], Awaitable[StrategyOutcome]]


class CitationResolver:
    """Run the resolution cascade against BAILII and Find Case Law.

    Args:
        bailii: BAILII client (needs a probe client for the citation finder)
        fcl: Find Case Law client
        page_client: Redirect-following client used to verify constructed URLs
        pacer: Awaitable called between network calls (defaults to RequestPacer)

    Example:
        >>> resolver = CitationResolver(bailii, fcl, page_client=follow)
        >>> resolution = await resolver.resolve("Patel v Mirza [2016] UKSC 42")
        >>> resolution.status
        'resolved'
    """

    def __init__(
        self,
        bailii: BailiiClient,
        fcl: FindCaseLawClient,
        page_client: httpx.AsyncClient,
        pacer: Pacer | None = None,
    ) -> None:
        self.bailii = bailii
        self.fcl = fcl
        self.page_client = page_client
        self._pace: Pacer = pacer or RequestPacer()
        self._handlers: dict[ResolutionStage, StageHandler] = {
            ResolutionStage.NEUTRAL_CITATION: self._neutral_citation,
            ResolutionStage.CITATION_FINDER: self._citation_finder,
            ResolutionStage.TITLE_SEARCH: self._title_search,
            ResolutionStage.FCL_SEARCH: self._fcl_search,
            ResolutionStage.FCL_CITATION_SEARCH: self._fcl_citation_search,
            ResolutionStage.FULL_TEXT_SEARCH: self._full_text_search,
        }

    async def resolve(self, citation: str, case_name: str | None = None) -> CitationResolution:
        """Resolve a citation to ranked, verified candidates.

        Args:
            citation: Free-text citation, e.g. 'Smith v Jones [2019] EWCA Civ 7'
            case_name: Optional case name; extracted from the citation if omitted

        Returns:
            CitationResolution with status 'resolved' or 'unresolvable'
        """
        name = case_name or extract_case_name(citation)
        run = ResolutionRun(
            citation=citation,
            case_name=name,
            search_terms=extract_party_search_terms(name) if name else [],
        )
        log = logger.bind(citation=citation)
        log.info("citation_resolution_started", case_name=name)

        stage = TRANSITIONS[ResolutionStage.START]
        while stage is not ResolutionStage.DONE:
            outcome = await self._handlers[stage](run)
            run.merge(outcome.candidates)

            if stage is not ResolutionStage.FULL_TEXT_SEARCH:
                if outcome.should_terminate and run.candidates:
                    candidates = run.candidates
                    if outcome.rank_before_return:
                        candidates = boost_year_matches(candidates, citation)
                    log.info(
                        "citation_resolved",
                        stage=stage.value,
                        count=len(candidates),
                        network_calls=run.network_calls,
                    )
                    return self._result(run, candidates, "resolved")

            stage = TRANSITIONS[stage]

        ranked = boost_year_matches(run.candidates, citation)
        status = "resolved" if ranked else "unresolvable"
        log.info(
            "citation_resolution_finished",
            status=status,
            count=len(ranked),
            network_calls=run.network_calls,
        )
        return self._result(run, ranked, status)

    @staticmethod
    def _result(
        run: ResolutionRun, candidates: list[ResolvedCandidate], status: str
    ) -> CitationResolution:
        return CitationResolution(
            citation=run.citation,
            case_name=run.case_name,
            candidates=list(candidates),
            status=status,
            attempts_log=list(run.attempts_log),
        )

    async def _network(
        self, run: ResolutionRun, call: Callable[..., Awaitable[Any]], *args: Any
    ) -> Any:
        """Make one outbound call, pausing first unless it is the run's first."""
        if run.network_calls:
            await self._pace()
        run.network_calls += 1
        return await call(*args)

    # ===== Strategy 1: neutral citation -> constructed URLs =====

    async def _neutral_citation(self, run: ResolutionRun) -> StrategyOutcome:
        match = match_neutral_citation(run.citation)
        if match is None:
            run.log("Strategy 1: No neutral citation pattern matched")
            return StrategyOutcome()

        run.log(f"Strategy 1: Neutral citation matched ({match.code})")
        found: list[ResolvedCandidate] = []

        bailii_check = await self._network(run, check_url, self.page_client, match.bailii_url)
        if bailii_check.exists:
            found.append(
                ResolvedCandidate(
                    url=match.bailii_url,
                    source=CandidateSource.BAILII.value,
                    confidence=NEUTRAL_BAILII_CONFIDENCE,
                    title=bailii_check.title,
                    resolution_method=ResolutionMethod.NEUTRAL_CITATION_BAILII.value,
                )
            )
            run.log(f"  → BAILII URL verified: {match.bailii_url}")
        else:
            run.log(f"  → BAILII URL not found: {match.bailii_url}")

        fcl_check = await self._network(run, check_url, self.page_client, match.fcl_url)
        if fcl_check.exists:
            found.append(
                ResolvedCandidate(
                    url=match.fcl_url,
                    source=CandidateSource.FIND_CASE_LAW.value,
                    confidence=NEUTRAL_FCL_CONFIDENCE,
                    title=fcl_check.title,
                    resolution_method=ResolutionMethod.NEUTRAL_CITATION_FCL.value,
                )
            )
            run.log(f"  → FCL URL verified: {match.fcl_url}")
        else:
            run.log(f"  → FCL URL not found: {match.fcl_url}")

        return StrategyOutcome(candidates=found, should_terminate=bool(found))

    # ===== Strategy 2: BAILII citation finder =====

    async def _citation_finder(self, run: ResolutionRun) -> StrategyOutcome:
        run.log("Strategy 2: BAILII citation finder")
        found = await self._network(run, self.bailii.find_by_citation, run.citation)
        if found is None:
            run.log("  → No redirect (citation not recognised)")
            return StrategyOutcome()

        run.log(f"  → Found via 302 redirect: {found.url}")
        return StrategyOutcome(candidates=[found], should_terminate=True)

    # ===== Strategy 3: BAILII title search =====

    async def _title_search(self, run: ResolutionRun) -> StrategyOutcome:
        if not run.search_terms:
            return StrategyOutcome()

        run.log(f"Strategy 3: BAILII title search for: {' '.join(run.search_terms)}")
        results = await self._network(run, self.bailii.search_by_title, " ".join(run.search_terms))
        if results:
            run.log(f"  → Found {len(results)} result(s)")
        else:
            run.log("  → No title search results")
        return StrategyOutcome(candidates=results, should_terminate=bool(results))

    # ===== Strategy 4: Find Case Law Atom search by party names =====

    async def _fcl_search(self, run: ResolutionRun) -> StrategyOutcome:
        if not run.search_terms:
            return StrategyOutcome()

        query = " ".join(run.search_terms)
        run.log(f"Strategy 4: FCL Atom search for: {query}")
        results = await self._network(run, self.fcl.search, query)
        self._log_fcl_results(run, results)
        return StrategyOutcome(candidates=results, should_terminate=bool(results))

    # ===== Strategy 4b: Find Case Law search by citation text =====

    async def _fcl_citation_search(self, run: ResolutionRun) -> StrategyOutcome:
        if run.case_name is not None:
            return StrategyOutcome()

        run.log("Strategy 4b: FCL search by citation text")
        results = await self._network(run, self.fcl.search, run.citation)
        self._log_fcl_results(run, results)
        # The only early exit that ranks before returning
        return StrategyOutcome(
            candidates=results, should_terminate=bool(results), rank_before_return=True
        )

    @staticmethod
    def _log_fcl_results(run: ResolutionRun, results: list[ResolvedCandidate]) -> None:
        if results:
            run.log(f"  → Found {len(results)} FCL result(s)")
        else:
            run.log("  → No FCL results")

    # ===== Strategy 5: BAILII full-text search =====

    def _full_text_query(self, run: ResolutionRun) -> str:
        if not run.search_terms:
            return run.citation
        query = " ".join(run.search_terms)
        year = extract_year(run.citation)
        return f"{query} {year}" if year else query

    async def _full_text_search(self, run: ResolutionRun) -> StrategyOutcome:
        query = self._full_text_query(run)
        if not query.strip():
            return StrategyOutcome()

        run.log(f"Strategy 5: BAILII full-text search for: {query}")
        results = await self._network(run, self.bailii.search_fulltext, query)
        if results:
            run.log(f"  → Found {len(results)} full-text result(s)")
        else:
            run.log("  → No full-text results")
        return StrategyOutcome(candidates=results)


__all__ = [
    "CitationResolver",
    "ResolutionRun",
    "ResolutionStage",
    "StrategyOutcome",
    "TRANSITIONS",
]
