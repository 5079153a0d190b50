"""
Corpus Store — Immutable In-Memory Case and Advocate Collections.

Loads the legal case corpus once at startup and exposes O(1) lookups:
- Cases by numeric id
- Advocates by string id
- Cases handled by an advocate (corpus order)
- Keyword suggestions for the search box
"""

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

logger = logging.getLogger(__name__)


class CorpusLoadError(Exception):
    """Raised when the corpus document cannot be read, parsed or validated."""


# ─── Validation Helpers ──────────────────────────────────────────────────────

def _require(obj: Mapping, key: str, kind: type, where: str) -> Any:
    if key not in obj:
        raise CorpusLoadError(f"{where}: missing field '{key}'")
    value = obj[key]
    # bool is an int subclass
    if not isinstance(value, kind) or isinstance(value, bool):
        raise CorpusLoadError(
            f"{where}: field '{key}' must be {kind.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


# ─── Records ─────────────────────────────────────────────────────────────────

CASE_FIELDS = ("id", "problem_statement", "keywords", "simulated_law", "advocate_id")
ADVOCATE_FIELDS = ("id", "name", "specialization")


@dataclass(frozen=True)
class CaseRecord:
    """A single legal case from the corpus."""

    id: int
    problem_statement: str
    keywords: tuple[str, ...]
    law_explanation: str
    advocate_id: str
    simulated_law: Mapping = field(default_factory=lambda: MappingProxyType({}))
    extra: Mapping = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_dict(cls, data: Any) -> "CaseRecord":
        """
        Build a case from its JSON object.

        Raises:
            CorpusLoadError: If a required field is missing or mistyped.
        """
        if not isinstance(data, dict):
            raise CorpusLoadError(f"case entry must be an object, got {type(data).__name__}")

        case_id = _require(data, "id", int, "case")
        where = f"case {case_id}"

        keywords = _require(data, "keywords", list, where)
        if not keywords:
            raise CorpusLoadError(f"{where}: 'keywords' must not be empty")
        if not all(isinstance(k, str) for k in keywords):
            raise CorpusLoadError(f"{where}: every keyword must be a string")

        law = _require(data, "simulated_law", dict, where)
        explanation = _require(law, "explanation", str, f"{where} simulated_law")

        return cls(
            id=case_id,
            problem_statement=_require(data, "problem_statement", str, where),
            keywords=tuple(keywords),
            law_explanation=explanation,
            advocate_id=_require(data, "advocate_id", str, where),
            simulated_law=_frozen(law),
            extra=_frozen({k: v for k, v in data.items() if k not in CASE_FIELDS}),
        )

    def to_dict(self) -> dict:
        """Rebuild the case in its source JSON shape."""
        return {
            "id": self.id,
            **copy.deepcopy(dict(self.extra)),
            "problem_statement": self.problem_statement,
            "keywords": list(self.keywords),
            "simulated_law": copy.deepcopy(dict(self.simulated_law)),
            "advocate_id": self.advocate_id,
        }


@dataclass(frozen=True)
class Advocate:
    """An advocate who handled one or more corpus cases."""

    id: str
    name: str
    specialization: str
    extra: Mapping = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_dict(cls, data: Any) -> "Advocate":
        if not isinstance(data, dict):
            raise CorpusLoadError(
                f"advocate entry must be an object, got {type(data).__name__}"
            )
        advocate_id = _require(data, "id", str, "advocate")
        where = f"advocate {advocate_id}"
        return cls(
            id=advocate_id,
            name=_require(data, "name", str, where),
            specialization=_require(data, "specialization", str, where),
            extra=_frozen({k: v for k, v in data.items() if k not in ADVOCATE_FIELDS}),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "specialization": self.specialization,
            **copy.deepcopy(dict(self.extra)),
        }


# ─── Corpus Store ────────────────────────────────────────────────────────────

class CorpusStore:
    """
    Read-only collections of cases and advocates.

    Built once, then only read. Lookup indexes are computed at
    construction so every lookup is a dict access.
    """

    def __init__(self, cases: list[CaseRecord], advocates: list[Advocate]):
        self._cases = tuple(cases)
        self._advocates = tuple(advocates)

        self._cases_by_id: dict[int, CaseRecord] = {}
        for case in self._cases:
            if case.id in self._cases_by_id:
                raise CorpusLoadError(f"duplicate case id {case.id}")
            self._cases_by_id[case.id] = case

        self._advocates_by_id: dict[str, Advocate] = {}
        for advocate in self._advocates:
            if advocate.id in self._advocates_by_id:
                raise CorpusLoadError(f"duplicate advocate id '{advocate.id}'")
            self._advocates_by_id[advocate.id] = advocate

        by_advocate: dict[str, list[CaseRecord]] = {}
        for case in self._cases:
            by_advocate.setdefault(case.advocate_id, []).append(case)
        self._cases_by_advocate = {k: tuple(v) for k, v in by_advocate.items()}

    @classmethod
    def from_dict(cls, data: Any) -> "CorpusStore":
        """
        Validate a parsed corpus document and build the store.

        Args:
            data: Object with top-level 'cases' and 'advocates' arrays.

        Raises:
            CorpusLoadError: On any structural or field error.
        """
        if not isinstance(data, dict):
            raise CorpusLoadError("corpus document must be a JSON object")
        for key in ("cases", "advocates"):
            if not isinstance(data.get(key), list):
                raise CorpusLoadError(f"corpus document needs a '{key}' array")

        cases = [CaseRecord.from_dict(item) for item in data["cases"]]
        advocates = [Advocate.from_dict(item) for item in data["advocates"]]
        return cls(cases, advocates)

    @property
    def cases(self) -> tuple[CaseRecord, ...]:
        return self._cases

    @property
    def advocates(self) -> tuple[Advocate, ...]:
        return self._advocates

    def find_advocate_by_id(self, advocate_id: Any) -> Optional[Advocate]:
        """Return the advocate with this id, or None."""
        if not isinstance(advocate_id, str):
            return None
        return self._advocates_by_id.get(advocate_id)

    def find_case_by_id(self, case_id: Any) -> Optional[CaseRecord]:
        """Return the case with this numeric id, or None."""
        if not isinstance(case_id, int) or isinstance(case_id, bool):
            return None
        return self._cases_by_id.get(case_id)

    def find_cases_by_advocate_id(self, advocate_id: Any) -> list[CaseRecord]:
        """All cases handled by an advocate, in corpus order."""
        if not isinstance(advocate_id, str):
            return []
        return list(self._cases_by_advocate.get(advocate_id, ()))

    def suggestions(self) -> list[str]:
        """Distinct keywords across all cases, sorted."""
        keywords = set()
        for case in self._cases:
            keywords.update(case.keywords)
        return sorted(keywords)

    def get_stats(self) -> dict:
        """Corpus size summary."""
        return {
            "total_cases": len(self._cases),
            "total_advocates": len(self._advocates),
            "total_keywords": len(self.suggestions()),
        }

    def __len__(self) -> int:
        return len(self._cases)

    def __repr__(self) -> str:
        return f"CorpusStore(cases={len(self._cases)}, advocates={len(self._advocates)})"


def load_corpus(path: Union[str, Path]) -> CorpusStore:
    """
    Read and validate the corpus JSON file.

    Args:
        path: Location of the corpus document.

    Returns:
        The loaded store.

    Raises:
        CorpusLoadError: If the file is missing, unreadable, not valid
            JSON, or fails validation.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CorpusLoadError(f"corpus file not found: {path}") from e
    except OSError as e:
        raise CorpusLoadError(f"cannot read corpus file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CorpusLoadError(f"corpus file {path} is not valid JSON: {e}") from e

    store = CorpusStore.from_dict(data)
    logger.info(
        "Loaded %d cases and %d advocates from %s",
        len(store.cases), len(store.advocates), path,
    )
    return store
