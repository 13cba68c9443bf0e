"""Pydantic models for dispatcher settings."""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel, frozen=True):
    """Runtime configuration loaded from environment variables."""

    allow_quit: bool = True
    quit_status: int = Field(default=1, ge=0, le=255)
    max_dispatch_depth: int = Field(default=4, ge=1)
    # Push a LogHandler onto every new Run
    log_uncaught: bool = False


def _parse_bool(name: str, default: str) -> bool:
    value = os.getenv(name, default).strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    msg = f"{name} must be a boolean (true/false), got {value!r}"
    raise ValueError(msg)


def _parse_int(name: str, default: str, *, minimum: int, maximum: int | None = None) -> int:
    raw = os.getenv(name, default).strip()
    try:
        value = int(raw)
    except ValueError:
        msg = f"{name} must be an integer, got {raw!r}"
        raise ValueError(msg) from None
    if value < minimum or (maximum is not None and value > maximum):
        upper = "" if maximum is None else f" and <= {maximum}"
        msg = f"{name} must be >= {minimum}{upper}, got {value}"
        raise ValueError(msg)
    return value


def load_settings() -> Settings:
    """Load settings from environment variables with defaults."""
    load_dotenv()

    return Settings(
        allow_quit=_parse_bool("DAMNIT_ALLOW_QUIT", "true"),
        quit_status=_parse_int("DAMNIT_QUIT_STATUS", "1", minimum=0, maximum=255),
        max_dispatch_depth=_parse_int("DAMNIT_MAX_DISPATCH_DEPTH", "4", minimum=1),
        log_uncaught=_parse_bool("DAMNIT_LOG_UNCAUGHT", "false"),
    )
