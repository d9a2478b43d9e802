"""FastAPI endpoint for the cargo packer."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from cargo_packer.config import cors_origins, load_settings
from cargo_packer.containers import CONTAINER_PRESETS_CM
from cargo_packer.io.schemas import PackRequestSchema, PackResponseSchema
from cargo_packer.planning import build_plan

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Cargo Packer API",
    description="3D cargo packing for vans and containers",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)


# Sync endpoint: FastAPI runs it in its threadpool, so a packing run is one
# unit of work and callers only ever see the full result.
@app.post("/pack", response_model=PackResponseSchema)
def pack_endpoint(request: PackRequestSchema) -> PackResponseSchema:
    """
    Pack items into a container and return placements.

    Input (request body):
        {
            "container_preset": "VAN",
            "items": [
                { "id": "A", "length": 50, "width": 40, "height": 30, "weight": 18, "quantity": 4 }
            ]
        }
    """
    try:
        plan = build_plan(request, settings=load_settings())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"ERROR in /pack endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(f"packed={plan.packed_count}, unplaced={len(plan.unplaced)}")
    return plan


@app.get("/presets")
def presets() -> dict[str, Any]:
    """Available container presets (cm / kg)."""
    return {"presets": CONTAINER_PRESETS_CM}


@app.get("/health")
def health() -> dict[str, Any]:
    """Health check endpoint."""
    return {"ok": True}
