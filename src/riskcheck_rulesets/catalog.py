"""QuestionCatalog — loads the YAML question catalog from ``v1/`` into typed models.

This is the single source of truth for question data at runtime.  Both the
interactive flow (which question comes next, is this the last one) and the
scoring pass read from the same catalog, so what the questionnaire presents
and what the engine scores cannot drift apart.

Usage::

    catalog = QuestionCatalog()     # defaults to v1/ relative to repo root
    catalog.load()                  # parse all YAML files

    q = catalog.get_question("q_lump")
    for q in catalog.questions: ...
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from riskcheck_rulesets.constants import AGE_QID, SEX_QID
from riskcheck_rulesets.models.question import (
    IntegerQuestion,
    Question,
    SingleChoiceQuestion,
    question_mapper,
)
from riskcheck_rulesets.models.schema import RiskBandTable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------

def find_repo_root(start: Optional[Path] = None) -> Path:
    """Walk upwards from *start* to find the repo root (dir with pyproject.toml or .git).

    Falls back to cwd if no marker is found.
    """
    p = (start or Path(__file__).resolve()).parent
    for parent in [p, *p.parents]:
        if (parent / "pyproject.toml").exists() or (parent / ".git").exists():
            return parent
    return Path.cwd()


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def parse_question(raw: dict) -> Question:
    """Build the typed question for one YAML entry via ``question_mapper``."""
    qtype = raw.get("question_type")
    cls = question_mapper.get(qtype)
    if cls is None:
        raise ValueError(f"Unknown question_type '{qtype}' for {raw.get('qid')!r}")
    return cls(**raw)


# ---------------------------------------------------------------------------
# QuestionCatalog
# ---------------------------------------------------------------------------

class QuestionCatalog:
    """Loads the question catalog and band table from ``v1/``.

    Attributes populated after :meth:`load` (or :meth:`from_questions`):

        version     — catalog version tag from questions.yaml
        questions   — list[Question] in catalog order
        bands       — RiskBandTable with per-band advice
    """

    def __init__(self, catalog_dir: str | Path | None = None) -> None:
        if catalog_dir is None:
            catalog_dir = find_repo_root() / "v1"
        self._base = Path(catalog_dir)

        # Populated by load()
        self.version: str | None = None
        self.questions: list[Question] = []
        self.bands: RiskBandTable | None = None
        self._by_qid: dict[str, Question] = {}

    @classmethod
    def from_questions(
        cls,
        questions: list[Question],
        bands: RiskBandTable,
        *,
        version: str | None = None,
    ) -> "QuestionCatalog":
        """Build a catalog from already-typed models (no YAML involved)."""
        catalog = cls(catalog_dir=".")
        catalog.version = version
        catalog.bands = bands
        catalog._set_questions(questions)
        return catalog

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Parse all YAML files under the catalog directory into typed models.

        Call this once at startup.  Raises ``FileNotFoundError`` if expected
        YAML files are missing and ``ValueError`` if the catalog breaks an
        ordering or reference invariant.
        """
        self._load_questions()
        self._load_bands()
        logger.info(
            "QuestionCatalog %s loaded: %d questions (%d scored)",
            self.version,
            len(self.questions),
            len(self.scored_questions),
        )

    def _load_questions(self) -> None:
        """Load v1/catalog/questions.yaml, preserving file order."""
        raw = load_yaml(self._base / "catalog" / "questions.yaml")
        self.version = str(raw.get("version")) if raw.get("version") is not None else None
        self._set_questions([parse_question(q) for q in raw.get("questions", [])])

    def _load_bands(self) -> None:
        """Load v1/const/risk_bands.yaml."""
        self.bands = RiskBandTable(**load_yaml(self._base / "const" / "risk_bands.yaml"))

    def _set_questions(self, questions: list[Question]) -> None:
        self._validate(questions)
        self.questions = list(questions)
        self._by_qid = {q.qid: q for q in self.questions}

    @staticmethod
    def _validate(questions: list[Question]) -> None:
        """Check catalog-wide invariants.

        - qids are unique
        - the mandatory demographic questions exist with the expected types
        - applicability predicates only reference *earlier* questions, so
          they are always evaluable from the answers collected so far
        """
        seen: set[str] = set()
        for q in questions:
            if q.qid in seen:
                raise ValueError(f"Duplicate qid in catalog: {q.qid}")
            for ref in q.depends_on:
                if ref not in seen:
                    raise ValueError(
                        f"Question {q.qid} depends on {ref}, which does not precede it"
                    )
            seen.add(q.qid)

        by_qid = {q.qid: q for q in questions}
        if not isinstance(by_qid.get(AGE_QID), IntegerQuestion):
            raise ValueError(f"Catalog must define {AGE_QID} as an integer question")
        if not isinstance(by_qid.get(SEX_QID), SingleChoiceQuestion):
            raise ValueError(f"Catalog must define {SEX_QID} as a single_choice question")
        for qid in (AGE_QID, SEX_QID):
            if by_qid[qid].applies_when:
                raise ValueError(f"Mandatory question {qid} must always apply")

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def __contains__(self, qid: str) -> bool:
        return qid in self._by_qid

    def get_question(self, qid: str) -> Question:
        """Look up a single question by qid.

        Raises:
            KeyError: if the qid is not in the catalog.
        """
        return self._by_qid[qid]

    @property
    def scored_questions(self) -> list[Question]:
        """Questions that carry a weight, in catalog order."""
        return [q for q in self.questions if q.is_scored]
