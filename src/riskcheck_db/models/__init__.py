"""ORM models for riskcheck_db."""

from riskcheck_db.models.base import Base
from riskcheck_db.models.session import RiskSession

__all__ = ["Base", "RiskSession"]
