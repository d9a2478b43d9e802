"""Packing tolerances and tuning, overridable through CARGO_PACKER_* env vars."""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

ENV_PREFIX = "CARGO_PACKER_"


class PackingSettings(BaseModel):
    """
    Tolerances used by the packer, in the caller's length unit.

    Defaults assume centimetres (1.0 == 1 cm).
    """

    epsilon: float = Field(default=0.001, gt=0, description="Float comparison slack and minimum free-space extent")
    cylinder_clearance: float = Field(default=1.0, ge=0, description="Extra X/Z clearance when a cylinder is involved")
    sphere_clearance: float = Field(default=0.5, ge=0, description="Extra clearance on all axes when a sphere is involved")
    gravity_step: float = Field(default=0.5, gt=0, description="Vertical step used while settling")
    overlap_margin: float = Field(default=0.02, ge=0, description="Near-touching tolerance for the overlap resolver")
    separation_margin: float = Field(default=0.2, ge=0, description="Extra gap added when pushing items apart")
    max_correction_rounds: int = Field(default=20, gt=0, description="Cap on overlap resolver rounds")
    height_weight: float = Field(default=10.0, ge=0, description="Weight of the height term in stable scoring")


def load_settings() -> PackingSettings:
    """Build settings from the environment (and a local .env when present)."""
    # Does not override variables already set in the environment
    load_dotenv()

    overrides: dict[str, str] = {}
    for name in PackingSettings.model_fields:
        value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if value is not None and value.strip():
            overrides[name] = value.strip()
    return PackingSettings(**overrides)


def cors_origins() -> list[str]:
    """Allowed CORS origins for the HTTP API."""
    load_dotenv()
    raw = os.getenv(f"{ENV_PREFIX}CORS_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
