"""
Configuration — typed settings loaded from environment/.env, plus logging setup.

Uses pydantic-settings to:
  - Load from environment variables prefixed PEM_COLLECTION_
  - Fall back to a .env file
  - Validate values once, when settings are created

The chain order arrives as free text (PEM_COLLECTION_CHAIN_ORDER=root-first)
and is mapped onto ChainOrderPolicy here, leniently: unknown text means
ROOT_LAST. Inside the package the policy is only ever the enum.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pem_collection.domain.policy import ChainOrderPolicy, parse_policy
from pem_collection.failure import ErrorCode
from pem_collection.result import Result

# Resolve .env relative to the project root so loading does not depend on the
# working directory.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class PemCollectionSettings(BaseSettings):
    """
    Settings for parsing bundles and encoding private keys.

    Load order (highest priority first):
      1. Environment variables
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="PEM_COLLECTION_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    chain_order: ChainOrderPolicy = Field(
        default=ChainOrderPolicy.ROOT_LAST,
        description="Bundle certificate order: root-last, root-first or ignore",
    )
    key_format: str = Field(default="", description="Private key encoding hint, e.g. legacy-pem")
    log_level: str = Field(default="INFO")

    @field_validator("chain_order", mode="before")
    @classmethod
    def parse_chain_order(cls, value: Any) -> ChainOrderPolicy:
        """Accept any text; unrecognized values fall back to root-last."""
        if isinstance(value, ChainOrderPolicy):
            return value
        return parse_policy(str(value) if value is not None else None)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}")
        return level


def load_settings(**overrides: Any) -> Result[PemCollectionSettings]:
    """Create settings, reporting validation problems as CONFIGURATION_ERROR."""
    return Result.from_computation(
        lambda: PemCollectionSettings(**overrides),
        ErrorCode.CONFIGURATION_ERROR,
        "Invalid pem-collection configuration",
    )


def configure_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog for structured console logging.

    Events below `log_level` are dropped by the filtering bound logger.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
