"""
Protocol configuration parameters for Huddle.

Defines scheduling, bidding, registry and rating limits. Values can be
overridden through HUDDLE_* environment variables or a .env file.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationInfo, field_validator

ENV_PREFIX = "HUDDLE_"


class HuddleConfig(BaseModel):
    """Protocol-wide configuration parameters"""

    # Scheduling
    min_schedule_lead: int = Field(default=0, ge=0)  # Seconds past "now" a slot must be

    # Bidding
    min_bid_increment: int = Field(default=0, ge=0)  # Added on top of the value to beat
    max_bids_per_user: int = Field(default=64, gt=0)  # Distinct Huddles a bidder can bid on

    # Hosts
    max_huddles_per_host: int = Field(default=64, gt=0)
    max_handle_length: int = Field(default=64, gt=0)
    max_proof_length: int = Field(default=256, gt=0)

    # Reputation
    min_stars: int = Field(default=1, ge=0)
    max_stars: int = Field(default=5, gt=0)

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    @field_validator("max_stars")
    @classmethod
    def _stars_range(cls, value: int, info: ValidationInfo) -> int:
        min_stars = info.data.get("min_stars", 0)
        if value < min_stars:
            raise ValueError(f"max_stars ({value}) must be >= min_stars ({min_stars})")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level


def load_config(env_file: Optional[str] = None) -> HuddleConfig:
    """
    Load configuration from the environment.

    Reads HUDDLE_<FIELD> variables, after loading env_file (or a .env in
    the working directory) with python-dotenv.

    Args:
        env_file: Optional path to a .env file

    Returns:
        HuddleConfig instance

    Raises:
        pydantic.ValidationError: if a value is malformed
    """
    load_dotenv(dotenv_path=env_file)

    overrides = {}
    for name in HuddleConfig.model_fields:
        raw = os.environ.get(ENV_PREFIX + name.upper())
        if raw is not None and raw != "":
            overrides[name] = raw

    return HuddleConfig(**overrides)
