"""
Keyword Relevance Search Engine for Legal Cases.

Scores every case against the query terms with three weighted
substring signals and returns the top matches.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from corpus import Advocate, CaseRecord, CorpusStore
from text_processing import tokenize_query

logger = logging.getLogger(__name__)

KEYWORD_WEIGHT = 10
PROBLEM_STATEMENT_WEIGHT = 5
LAW_EXPLANATION_WEIGHT = 2

MAX_RESULTS = 5

_NO_ADVOCATE = object()


@dataclass(frozen=True)
class ScoredMatch:
    """A case paired with its relevance score for one query."""

    case: CaseRecord
    relevance_score: int

    def to_dict(self, advocate: Any = _NO_ADVOCATE) -> dict:
        """
        Serialize as the case JSON plus 'relevanceScore'.

        Args:
            advocate: When given, embedded under 'advocate'. Pass None
                      for an unresolved advocate reference.
        """
        result = self.case.to_dict()
        result["relevanceScore"] = self.relevance_score
        if advocate is not _NO_ADVOCATE:
            result["advocate"] = advocate.to_dict() if advocate is not None else None
        return result


# ─── Scoring ─────────────────────────────────────────────────────────────────

def score_case(terms: list[str], case: CaseRecord) -> int:
    """
    Relevance of one case for a list of query terms.

    - Keywords (10 each): every keyword/term pair where either one
      contains the other. A term hitting two keywords scores twice.
    - Problem statement (5 each): every term found in the text.
    - Law explanation (2 each): every term found in the text.

    Args:
        terms: Normalized query terms.
        case: Case to score.

    Returns:
        Non-negative integer score (0 means no match).
    """
    score = 0

    for keyword in case.keywords:
        keyword = keyword.lower()
        for term in terms:
            if term in keyword or keyword in term:
                score += KEYWORD_WEIGHT

    problem_statement = case.problem_statement.lower()
    for term in terms:
        if term in problem_statement:
            score += PROBLEM_STATEMENT_WEIGHT

    law_explanation = case.law_explanation.lower()
    for term in terms:
        if term in law_explanation:
            score += LAW_EXPLANATION_WEIGHT

    return score


def rank_cases(
    query: Any,
    cases: Iterable[CaseRecord],
    limit: int = MAX_RESULTS,
) -> list[ScoredMatch]:
    """
    Rank cases by relevance to a query.

    Args:
        query: Raw query text.
        cases: Cases in corpus order.
        limit: Maximum matches to return.

    Returns:
        Up to `limit` matches with score > 0, highest first. Equal
        scores keep corpus order.
    """
    terms = tokenize_query(query)
    if not terms:
        return []

    scored = [ScoredMatch(case, score_case(terms, case)) for case in cases]
    matches = [m for m in scored if m.relevance_score > 0]

    # sorted() is stable, so ties stay in corpus order
    matches = sorted(matches, key=lambda m: m.relevance_score, reverse=True)
    return matches[:limit]


# ─── Engine ──────────────────────────────────────────────────────────────────

class LegalSearchEngine:
    """
    Search engine bound to a loaded corpus.

    Holds no mutable state, so one instance can serve concurrent
    requests.
    """

    def __init__(self, store: CorpusStore, limit: int = MAX_RESULTS):
        self.store = store
        self.limit = limit

    def search(self, query: Any) -> list[ScoredMatch]:
        """
        Search for cases.

        Args:
            query: Search query

        Returns:
            Top matching cases with relevance scores
        """
        results = rank_cases(query, self.store.cases, limit=self.limit)
        logger.debug("Query %r matched %d cases", query, len(results))
        return results

    def advocate_for(self, match: ScoredMatch) -> Optional[Advocate]:
        """Resolve the advocate who handled a matched case."""
        return self.store.find_advocate_by_id(match.case.advocate_id)

    def get_stats(self) -> dict:
        """Get index statistics."""
        stats = self.store.get_stats()
        stats["max_results"] = self.limit
        return stats
