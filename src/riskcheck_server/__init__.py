"""riskcheck_server — FastAPI REST API for the risk-check SDK.

Exposes the IntakeController as a stateless HTTP API: assessment
submission, history, session detail, the interactive questionnaire step,
reference data, and administrative removal.
"""
