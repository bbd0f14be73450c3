"""Pydantic models for risk-check constants and reference data.

These models mirror the YAML files in ``v1/const/``:

    - RiskBandConst: display label and general advice for one risk band
    - RiskBandTable: the full band table plus the urgent-action message
"""

from typing import List

from pydantic import BaseModel, ConfigDict, model_validator

from riskcheck_rulesets.constants import BAND_ORDER


class RiskBandConst(BaseModel):
    """One risk band from risk_bands.yaml."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    recommendation: str


class RiskBandTable(BaseModel):
    """Contents of risk_bands.yaml.

    Every band in ``BAND_ORDER`` must be present exactly once.
    """

    model_config = ConfigDict(frozen=True)

    bands: List[RiskBandConst]
    urgent_action: str

    @model_validator(mode="after")
    def _chk(self):
        ids = [b.id for b in self.bands]
        if sorted(ids) != sorted(BAND_ORDER):
            raise ValueError(f"risk_bands.yaml must define exactly {BAND_ORDER}, got {ids}")
        return self

    def get(self, band_id: str) -> RiskBandConst:
        """Look up a band by id.  Raises KeyError if unknown."""
        for band in self.bands:
            if band.id == band_id:
                return band
        raise KeyError(band_id)
