"""QuestionCatalog loading and catalog-wide invariants."""

import pytest

from riskcheck_rulesets.catalog import QuestionCatalog, load_yaml, parse_question
from riskcheck_rulesets.models.question import (
    IntegerQuestion,
    Predicate,
    SingleChoiceQuestion,
)
from riskcheck_rulesets.models.schema import RiskBandConst, RiskBandTable


def _bands() -> RiskBandTable:
    return RiskBandTable(
        bands=[
            RiskBandConst(id="Low", label="Low Risk", recommendation="low advice"),
            RiskBandConst(id="Medium", label="Moderate Risk", recommendation="medium advice"),
            RiskBandConst(id="High", label="High Risk", recommendation="high advice"),
        ],
        urgent_action="URGENT ACTION: act now",
    )


def _age() -> IntegerQuestion:
    return IntegerQuestion(qid="q_age", question="Age?", min_value=10, max_value=100)


def _sex() -> SingleChoiceQuestion:
    return SingleChoiceQuestion(qid="q_sex", question="Sex?", options=["Female", "Male"])


class TestLoadedCatalog:
    """The shipped v1 catalog loads and matches the published question set."""

    def test_version(self, catalog):
        assert catalog.version == "v1"

    def test_question_order(self, catalog):
        assert [q.qid for q in catalog.questions] == [
            "q_age",
            "q_sex",
            "q_lump",
            "q_pain",
            "q_family",
            "q_bleeding",
            "q_urine_issue",
        ]

    def test_weights(self, catalog):
        weights = {q.qid: q.weight for q in catalog.scored_questions}
        assert weights == {
            "q_lump": 25,
            "q_pain": 10,
            "q_family": 20,
            "q_bleeding": 15,
            "q_urine_issue": 10,
        }

    def test_age_bounds(self, catalog):
        age = catalog.get_question("q_age")
        assert isinstance(age, IntegerQuestion)
        assert (age.min_value, age.max_value) == (10, 100)
        assert not age.is_scored

    def test_sex_specific_questions_have_predicates(self, catalog):
        bleeding = catalog.get_question("q_bleeding")
        urine = catalog.get_question("q_urine_issue")
        assert bleeding.applies_when == [Predicate(qid="q_sex", op="eq", value="Female")]
        assert urine.applies_when == [Predicate(qid="q_sex", op="eq", value="Male")]

    def test_yes_no_options_stay_strings(self, catalog):
        """YAML 1.1 would read bare Yes/No as booleans; the catalog quotes them."""
        lump = catalog.get_question("q_lump")
        assert lump.options == ["No", "Yes"]
        assert lump.risk_answer == "Yes"

    def test_every_scored_question_has_recommendation(self, catalog):
        for q in catalog.scored_questions:
            assert q.recommendation, f"{q.qid} has no targeted recommendation"

    def test_band_table(self, catalog):
        assert [b.id for b in catalog.bands.bands] == ["Low", "Medium", "High"]
        assert catalog.bands.urgent_action.startswith("URGENT ACTION")
        assert catalog.bands.get("High").label == "High Risk"

    def test_contains_and_lookup(self, catalog):
        assert "q_lump" in catalog
        assert "q_smoking" not in catalog
        with pytest.raises(KeyError):
            catalog.get_question("q_smoking")


class TestCatalogInvariants:
    """Broken catalogs are rejected at load time."""

    def test_from_questions(self):
        c = QuestionCatalog.from_questions([_age(), _sex()], _bands(), version="test")
        assert c.version == "test"
        assert c.scored_questions == []

    def test_duplicate_qid_rejected(self):
        with pytest.raises(ValueError, match="Duplicate qid"):
            QuestionCatalog.from_questions([_age(), _sex(), _sex()], _bands())

    def test_forward_reference_rejected(self):
        late = SingleChoiceQuestion(
            qid="q_late",
            question="Late?",
            options=["No", "Yes"],
            applies_when=[Predicate(qid="q_sex", op="eq", value="Male")],
        )
        with pytest.raises(ValueError, match="does not precede"):
            QuestionCatalog.from_questions([_age(), late, _sex()], _bands())

    def test_missing_demographics_rejected(self):
        with pytest.raises(ValueError, match="q_age"):
            QuestionCatalog.from_questions([_sex()], _bands())

    def test_conditional_demographic_rejected(self):
        sex = SingleChoiceQuestion(
            qid="q_sex",
            question="Sex?",
            options=["Female", "Male"],
            applies_when=[Predicate(qid="q_age", op="ge", value=18)],
        )
        with pytest.raises(ValueError, match="must always apply"):
            QuestionCatalog.from_questions([_age(), sex], _bands())

    def test_risk_answer_must_be_an_option(self):
        with pytest.raises(ValueError):
            SingleChoiceQuestion(
                qid="q_x", question="X?", options=["No", "Yes"], weight=5, risk_answer="Maybe",
            )

    def test_scored_question_needs_risk_answer(self):
        with pytest.raises(ValueError):
            SingleChoiceQuestion(qid="q_x", question="X?", options=["No", "Yes"], weight=5)

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            SingleChoiceQuestion(
                qid="q_x", question="X?", options=["No", "Yes"], weight=-1, risk_answer="Yes",
            )

    def test_integer_question_cannot_be_scored(self):
        with pytest.raises(ValueError):
            IntegerQuestion(qid="q_x", question="X?", min_value=0, max_value=5, weight=3)

    def test_band_table_must_be_complete(self):
        with pytest.raises(ValueError):
            RiskBandTable(
                bands=[RiskBandConst(id="Low", label="Low", recommendation="x")],
                urgent_action="URGENT",
            )

    def test_unknown_question_type(self):
        with pytest.raises(ValueError, match="Unknown question_type"):
            parse_question({"qid": "q_x", "question": "X?", "question_type": "free_text"})


class TestYamlLoading:
    """File-level loading behaviour."""

    def test_missing_directory(self, tmp_path):
        c = QuestionCatalog(catalog_dir=tmp_path)
        with pytest.raises(FileNotFoundError):
            c.load()

    def test_load_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml(tmp_path / "nope.yaml")

    def test_custom_catalog_dir(self, tmp_path):
        (tmp_path / "catalog").mkdir()
        (tmp_path / "const").mkdir()
        (tmp_path / "catalog" / "questions.yaml").write_text(
            'version: "test-1"\n'
            "questions:\n"
            "  - {qid: q_age, question: 'Age?', question_type: integer, min_value: 10, max_value: 100}\n"
            "  - {qid: q_sex, question: 'Sex?', question_type: single_choice, options: [Female, Male]}\n"
            '  - {qid: q_smoke, question: "Smoke?", question_type: single_choice, options: ["No", "Yes"],'
            ' weight: 30, risk_answer: "Yes", recommendation: Stop smoking.}\n',
            encoding="utf-8",
        )
        (tmp_path / "const" / "risk_bands.yaml").write_text(
            "bands:\n"
            "  - {id: Low, label: Low, recommendation: low}\n"
            "  - {id: Medium, label: Medium, recommendation: medium}\n"
            "  - {id: High, label: High, recommendation: high}\n"
            "urgent_action: URGENT ACTION now\n",
            encoding="utf-8",
        )
        c = QuestionCatalog(catalog_dir=tmp_path)
        c.load()
        assert c.version == "test-1"
        assert [q.qid for q in c.scored_questions] == ["q_smoke"]
