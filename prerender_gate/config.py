"""
Prerender Gate - Configuration
===============================

What:  Settings for the snapshot pipeline, loaded with Pydantic Settings.
How:   PRERENDER_* environment variables (or a .env file) are validated into a
       frozen PrerenderSettings value. The value is built once at startup and
       handed to PrerenderService, which passes it on to the classifier and
       the upstream request builder.
Who:   main.create_app() and any host wiring the middleware by hand.

Environment variables:
    PRERENDER_SERVICE_URL       rendering service base URL
    PRERENDER_TOKEN             sent as X-Prerender-Token when non-empty
    PRERENDER_FORWARD_HEADERS   forward incoming headers (except Host) upstream
    PRERENDER_REQUEST_OPTIONS   JSON object; "headers" plus httpx request options
    PRERENDER_WHITELIST         regex, or JSON list of regexes
    PRERENDER_BLACKLIST         regex, or JSON list of regexes
    PRERENDER_LOG_LEVEL         DEBUG, INFO, WARNING, ERROR, CRITICAL
"""

import json
from typing import Annotated, Any, Callable, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

PATTERN_FIELDS = ("whitelist", "blacklist")


def _decode_pattern_lists(source: Callable[[], Dict[str, Any]]) -> Callable[[], Dict[str, Any]]:
    """
    Wrap an env/.env settings source so a JSON list in PRERENDER_WHITELIST or
    PRERENDER_BLACKLIST is decoded. Anything that is not a JSON list (for
    example the regex "[Pp]ublic/") stays a single pattern string.
    """

    def load() -> Dict[str, Any]:
        values = source()
        for name in PATTERN_FIELDS:
            raw = values.get(name)
            if not isinstance(raw, str) or not raw.strip().startswith("["):
                continue
            try:
                decoded = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if isinstance(decoded, list):
                values[name] = decoded
        return values

    # pydantic-settings keys per-source state by this name
    load.__name__ = type(source).__name__
    return load


class PrerenderSettings(BaseSettings):
    """
    Snapshot pipeline settings.

    Frozen model: attributes cannot be reassigned after construction. The
    freeze is shallow, so the request_options dict itself is still mutable.
    The upstream builder deep-copies it before every call and never writes
    back into it; hosts must not mutate it after handing the settings to a
    PrerenderService either.
    """

    # ── Rendering Service ─────────────────────────────────────────────────
    # The forwarded page URL is appended to this base; a "/" is inserted
    # when the base does not already end with one.
    service_url: str = Field(
        default="http://service.prerender.io/",
        description="Base URL of the rendering backend",
    )

    # Empty string disables the X-Prerender-Token header.
    token: str = Field(default="", description="Rendering service auth token")

    forward_headers: bool = Field(
        default=False,
        description="Copy every incoming header except Host onto the upstream call",
    )

    # Shape: {"headers": {...}, "timeout": 20.0, "follow_redirects": true, ...}
    # Non-header keys are passed as keyword arguments to httpx.AsyncClient.request.
    request_options: Dict[str, Any] = Field(default_factory=dict)

    # ── URL Filters ───────────────────────────────────────────────────────
    # None means "not configured". An empty list is configured and, for the
    # whitelist, rejects every request.
    whitelist: Annotated[Optional[List[str]], NoDecode] = Field(default=None)
    blacklist: Annotated[Optional[List[str]], NoDecode] = Field(default=None)

    @field_validator("whitelist", "blacklist", mode="before")
    @classmethod
    def normalize_patterns(cls, v: Any) -> Any:
        """A single pattern string becomes a one-element list."""
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("request_options", mode="before")
    @classmethod
    def decode_request_options(cls, v: Any) -> Any:
        if isinstance(v, str):
            return json.loads(v) if v.strip() else {}
        return v

    # ── Logging ───────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Keyword arguments are taken as-is; only environment text is JSON.
        return (
            init_settings,
            _decode_pattern_lists(env_settings),
            _decode_pattern_lists(dotenv_settings),
            file_secret_settings,
        )

    model_config = {
        "env_prefix": "PRERENDER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "frozen": True,
    }


# Default instance for the reference host in main.py
settings = PrerenderSettings()
