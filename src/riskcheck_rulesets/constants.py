"""Risk-check constants shared across the SDK.

These values are referenced by the resolver, scoring engine, and catalog
loader.  They mirror conventions encoded in the YAML catalog under ``v1/``.

The banding thresholds can be overridden via environment variables so that
deployments can adjust the banding policy without code changes.
"""

import os

# Demographic questions every submission must answer before scoring.
AGE_QID = "q_age"
SEX_QID = "q_sex"
MANDATORY_QIDS: tuple[str, ...] = (AGE_QID, SEX_QID)

# Band names ordered from least to most severe.
BAND_ORDER: list[str] = ["Low", "Medium", "High"]

# Score thresholds, closed on the lower end of each higher band:
#   score <  MEDIUM_RISK_THRESHOLD                        -> Low
#   MEDIUM_RISK_THRESHOLD <= score < HIGH_RISK_THRESHOLD  -> Medium
#   score >= HIGH_RISK_THRESHOLD                          -> High
# Overridable via MEDIUM_RISK_THRESHOLD / HIGH_RISK_THRESHOLD env vars.
MEDIUM_RISK_THRESHOLD = float(os.getenv("MEDIUM_RISK_THRESHOLD", "20"))
HIGH_RISK_THRESHOLD = float(os.getenv("HIGH_RISK_THRESHOLD", "40"))

