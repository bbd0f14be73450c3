import pytest

from riskcheck_rulesets.catalog import QuestionCatalog
from riskcheck_rulesets.scoring import ScoringEngine


@pytest.fixture(scope="session")
def catalog():
    """Load the v1 QuestionCatalog once for the entire test session."""
    c = QuestionCatalog()
    c.load()
    return c


@pytest.fixture
def scoring(catalog):
    """ScoringEngine with the default 20 / 40 thresholds."""
    return ScoringEngine(catalog, medium_threshold=20, high_threshold=40)
