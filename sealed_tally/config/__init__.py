"""Configuration for the tallying engine."""

from sealed_tally.config.tally_config import (
    AUTHORITY_ID_ENV,
    DEFAULT_REVEALER_ID,
    ENVIRONMENT_ENV,
    REVEALER_ID_ENV,
    STUB_KEY_ENV,
    TallyConfig,
    parse_stub_key,
)

__all__ = [
    "AUTHORITY_ID_ENV",
    "DEFAULT_REVEALER_ID",
    "ENVIRONMENT_ENV",
    "REVEALER_ID_ENV",
    "STUB_KEY_ENV",
    "TallyConfig",
    "parse_stub_key",
]
