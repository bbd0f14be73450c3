"""Reference data endpoints — the question catalog and the banding policy.

Read-only views of the versioned catalog under ``v1/`` and the threshold
constants, so the weights and cut points in force can be audited without
reading code.  No authentication is required.
"""

from fastapi import APIRouter, Depends

from riskcheck_rulesets.catalog import QuestionCatalog
from riskcheck_rulesets.intake import IntakeController

from riskcheck_server.dependencies import get_catalog, get_controller

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("/questions")
def list_questions(
    catalog: QuestionCatalog = Depends(get_catalog),
) -> dict:
    """Return the full catalog, including weights and applicability rules."""
    return {
        "version": catalog.version,
        "questions": [q.model_dump(exclude_none=True) for q in catalog.questions],
    }


@router.get("/risk-bands")
def list_risk_bands(
    controller: IntakeController = Depends(get_controller),
) -> dict:
    """Return band thresholds and the general advice attached to each band."""
    scoring = controller.scoring
    table = controller.catalog.bands
    lower_bounds = {
        "Low": 0.0,
        "Medium": scoring.medium_threshold,
        "High": scoring.high_threshold,
    }
    return {
        "thresholds": {
            "medium": scoring.medium_threshold,
            "high": scoring.high_threshold,
        },
        "bands": [
            {
                "id": band.id,
                "label": band.label,
                "min_score": lower_bounds[band.id],
                "recommendation": band.recommendation,
            }
            for band in table.bands
        ],
        "urgent_action": table.urgent_action,
    }
