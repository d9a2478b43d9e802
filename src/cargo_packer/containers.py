# src/cargo_packer/containers.py
from __future__ import annotations

from cargo_packer.models import Container

# Internal usable dims (cm) as width x height x depth, plus max payload (kg).
CONTAINER_PRESETS_CM: dict[str, dict[str, float]] = {
    "VAN":  {"width": 180.0, "height": 180.0, "depth": 350.0,  "max_weight": 1500.0},
    "20":   {"width": 235.2, "height": 239.5, "depth": 590.0},
    "20HC": {"width": 233.0, "height": 270.0, "depth": 589.1},
    "40":   {"width": 235.2, "height": 239.5, "depth": 1203.2},
    "40HC": {"width": 235.0, "height": 270.0, "depth": 1203.2, "max_weight": 26500.0},
    "48HC": {"width": 235.2, "height": 269.8, "depth": 1447.0},
    "53HC": {"width": 248.9, "height": 276.9, "depth": 1595.1},
}


def preset_container(preset: str, **overrides: float) -> Container:
    """
    Container for a named preset (case and surrounding blanks ignored).

    Keyword overrides replace single preset fields, e.g. a lower max_weight.
    """
    try:
        fields = CONTAINER_PRESETS_CM[preset.strip().upper()]
    except KeyError:
        raise ValueError(
            f"Unknown container_preset '{preset}'. Valid: {sorted(CONTAINER_PRESETS_CM)}"
        ) from None
    return Container(**{**fields, **overrides})
