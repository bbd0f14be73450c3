"""Answer-set builders shared across the test modules.

Every builder returns a fresh dict that passes submission validation for
the v1 catalog; keyword overrides replace or add individual answers, and an
override of ``None`` drops that qid entirely.
"""

COMMON_NO = {"q_lump": "No", "q_pain": "No", "q_family": "No"}


def _apply(base: dict, overrides: dict) -> dict:
    answers = dict(base)
    for qid, value in overrides.items():
        if value is None:
            answers.pop(qid, None)
        else:
            answers[qid] = value
    return answers


def female_answers(**overrides) -> dict:
    """Complete answers for a 34-year-old female, every risk factor "No"."""
    base = {"q_age": 34, "q_sex": "Female", **COMMON_NO, "q_bleeding": "No"}
    return _apply(base, overrides)


def male_answers(**overrides) -> dict:
    """Complete answers for a 58-year-old male, every risk factor "No"."""
    base = {"q_age": 58, "q_sex": "Male", **COMMON_NO, "q_urine_issue": "No"}
    return _apply(base, overrides)
