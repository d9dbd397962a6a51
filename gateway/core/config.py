"""Environment-driven settings for the gateway.

Read per request by the HTTP layer and handed to the core explicitly,
so nothing inside the core looks at process state.
"""

import os
from dataclasses import dataclass, field

DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class GatewaySettings:
    """Resolved gateway configuration.

    Attributes:
        api_key: Bearer credential for the upstream service ("" when unset).
        base_url: Upstream base URL without trailing slash.
        timeout: Per-request upstream timeout in seconds.
        cors_origins: Origins allowed by the CORS middleware.
    """
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @property
    def credential_configured(self) -> bool:
        return bool(self.api_key.strip())


def load_settings() -> GatewaySettings:
    """Build settings from environment variables.

    A missing DEEPSEEK_API_KEY is not an error here; the gateway raises
    ConfigurationError when a chat call is attempted without one.
    """
    base_url = os.environ.get("DEEPSEEK_API_URL", "").strip() or DEFAULT_BASE_URL
    origins = os.environ.get("CORS_ALLOW_ORIGINS", "*")

    return GatewaySettings(
        api_key=os.environ.get("DEEPSEEK_API_KEY", ""),
        base_url=base_url.rstrip("/"),
        timeout=float(os.environ.get("DEEPSEEK_TIMEOUT", str(DEFAULT_TIMEOUT))),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
    )
