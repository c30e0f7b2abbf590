"""
Process settings read from environment variables
"""

import logging
import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from commuteopt.governor.limiter import SHORT_WINDOW_SECONDS, seconds_per_request


class AppSettings(BaseModel):
    """Runtime settings for the analyzer and the directions proxy"""

    google_api_key: Optional[str] = Field(None, description="Google Directions API key (proxy side)")
    proxy_url: str = Field("http://localhost:8000", description="Directions proxy base URL")
    pacing_delay: Optional[float] = Field(
        None,
        ge=0,
        description="Seconds to wait after every provider call, derived from the proxy rate limit if unset"
    )
    call_timeout: float = Field(15.0, gt=0, description="Seconds to wait for one provider call")
    rate_limit_per_minute: int = Field(60, ge=1, description="Proxy requests per client per minute")
    rate_limit_per_day: int = Field(1000, ge=1, description="Proxy requests per client per day")
    forwarded_allow_ips: str = Field(
        "127.0.0.1",
        description="Comma-separated proxy addresses whose X-Forwarded-For headers are trusted"
    )
    log_level: str = Field("INFO", description="Logging level")

    @model_validator(mode="after")
    def derive_pacing_delay(self):
        """Pace calls so one client stays within the per-minute limit"""
        if self.pacing_delay is None:
            self.pacing_delay = seconds_per_request(self.rate_limit_per_minute, SHORT_WINDOW_SECONDS)
        return self

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Build settings from COMMUTEOPT_* variables and GOOGLE_API_KEY"""
        values = {
            "google_api_key": os.getenv("GOOGLE_API_KEY") or None,
            "proxy_url": os.getenv("COMMUTEOPT_PROXY_URL"),
            "pacing_delay": os.getenv("COMMUTEOPT_PACING_DELAY"),
            "call_timeout": os.getenv("COMMUTEOPT_CALL_TIMEOUT"),
            "rate_limit_per_minute": os.getenv("COMMUTEOPT_RATE_LIMIT_PER_MINUTE"),
            "rate_limit_per_day": os.getenv("COMMUTEOPT_RATE_LIMIT_PER_DAY"),
            "forwarded_allow_ips": os.getenv("COMMUTEOPT_FORWARDED_ALLOW_IPS"),
            "log_level": os.getenv("COMMUTEOPT_LOG_LEVEL"),
        }
        return cls(**{k: v for k, v in values.items() if v is not None})


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Settings are read once per process"""
    from dotenv import load_dotenv
    load_dotenv()

    return AppSettings.from_env()


def configure_logging(level: str = "INFO") -> None:
    """Console logging shared by the CLI and the proxy"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Quiet noisy libraries
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
