"""Server configuration read from environment variables at startup.

Every value has a local-development default.  ``SERVER_*`` variables cover
the HTTP process itself; ``ADMIN_API_KEY`` and ``TRUSTED_PROXY_SECRET``
guard admin access and caller identity; the banding thresholds default to
the SDK constants, which already honour ``MEDIUM_RISK_THRESHOLD`` and
``HIGH_RISK_THRESHOLD``.
"""

import os
from dataclasses import dataclass, field

from riskcheck_rulesets.constants import HIGH_RISK_THRESHOLD, MEDIUM_RISK_THRESHOLD

# History pagination.  Read at import time because FastAPI Query() defaults
# are fixed when the route is declared.
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "50"))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "200"))


def _csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _flag(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration."""

    host: str = "0.0.0.0"
    port: int = 8080
    # "*" allows any origin (development only)
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    # None -> the v1/ catalog at the repository root
    catalog_dir: str | None = None
    medium_risk_threshold: float = MEDIUM_RISK_THRESHOLD
    high_risk_threshold: float = HIGH_RISK_THRESHOLD

    # Development shortcut; production schemas come from Alembic
    auto_create_tables: bool = False

    # Shared secret for /admin routes; None disables them
    admin_api_key: str | None = None
    # When set, X-User-ID is only honoured alongside a matching X-Proxy-Secret
    trusted_proxy_secret: str | None = None


def load_settings() -> ServerSettings:
    """Build :class:`ServerSettings` from the process environment."""
    env = os.environ
    return ServerSettings(
        host=env.get("SERVER_HOST", "0.0.0.0"),
        port=int(env.get("SERVER_PORT", "8080")),
        cors_origins=_csv(env.get("SERVER_CORS_ORIGINS", "*")),
        log_level=env.get("SERVER_LOG_LEVEL", "INFO").upper(),
        catalog_dir=env.get("SERVER_CATALOG_DIR") or None,
        auto_create_tables=_flag(env.get("SERVER_AUTO_CREATE_TABLES", "")),
        admin_api_key=env.get("ADMIN_API_KEY") or None,
        trusted_proxy_secret=env.get("TRUSTED_PROXY_SECRET") or None,
    )
