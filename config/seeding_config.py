"""
Seeding Routine Configuration.

Provides configuration for:
    - Where the import source location lives (content root)
    - How many records each ready signal imports
    - Provenance stamped on every written record (imported_by)
    - Routine retry policy and readiness probe timing
    - Record generator locale / seed

Exports:
    SeedingConfig: Pydantic seeding configuration model
"""

import os
import socket
from typing import Optional
from pydantic import BaseModel, Field

from .defaults import SeedingDefaults


class SeedingConfig(BaseModel):
    """
    Behaviour of the resource-ready import routines.
    """

    content_root: str = Field(
        default_factory=os.getcwd,
        description="Root directory the import source location is derived from"
    )

    record_count: int = Field(
        default=SeedingDefaults.RECORD_COUNT,
        ge=1,
        le=100000,
        description="Records generated per ready signal"
    )

    imported_by: str = Field(
        default_factory=socket.gethostname,
        min_length=1,
        description="Provenance written to every record's imported_by field"
    )

    routine_retries: int = Field(
        default=SeedingDefaults.ROUTINE_RETRIES,
        ge=0,
        le=10,
        description="Extra attempts for routines that fail before any write"
    )

    retry_delay_seconds: float = Field(
        default=SeedingDefaults.RETRY_DELAY_SECONDS,
        ge=0,
        description="Base delay between routine attempts (doubled per attempt)"
    )

    readiness_timeout_seconds: float = Field(
        default=SeedingDefaults.READINESS_TIMEOUT_SECONDS,
        gt=0,
        description="How long the probe waits for a resource to become reachable"
    )

    readiness_poll_interval_seconds: float = Field(
        default=SeedingDefaults.READINESS_POLL_INTERVAL_SECONDS,
        gt=0,
        description="Delay between readiness probe attempts"
    )

    faker_locale: str = Field(default=SeedingDefaults.FAKER_LOCALE)
    faker_seed: Optional[int] = Field(
        default=None,
        description="Fixed seed for reproducible record content"
    )

    @classmethod
    def from_environment(cls):
        """Load from environment variables."""
        faker_seed = os.environ.get("SEED_FAKER_SEED")
        return cls(
            content_root=os.environ.get("CONTENT_ROOT", os.getcwd()),
            record_count=int(os.environ.get("SEED_RECORD_COUNT", str(SeedingDefaults.RECORD_COUNT))),
            imported_by=os.environ.get("SEED_IMPORTED_BY", socket.gethostname()),
            routine_retries=int(os.environ.get("SEED_ROUTINE_RETRIES", str(SeedingDefaults.ROUTINE_RETRIES))),
            retry_delay_seconds=float(os.environ.get("SEED_RETRY_DELAY_SECONDS", str(SeedingDefaults.RETRY_DELAY_SECONDS))),
            readiness_timeout_seconds=float(os.environ.get(
                "READINESS_TIMEOUT_SECONDS", str(SeedingDefaults.READINESS_TIMEOUT_SECONDS))),
            readiness_poll_interval_seconds=float(os.environ.get(
                "READINESS_POLL_INTERVAL_SECONDS", str(SeedingDefaults.READINESS_POLL_INTERVAL_SECONDS))),
            faker_locale=os.environ.get("SEED_FAKER_LOCALE", SeedingDefaults.FAKER_LOCALE),
            faker_seed=int(faker_seed) if faker_seed else None,
        )
