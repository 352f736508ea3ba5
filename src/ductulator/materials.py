"""Absolute roughness of common duct materials."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

DEFAULT_MATERIAL = "Galvanised steel"

# Absolute roughness height [m]
ROUGHNESS: dict[str, float] = {
    "Galvanised steel": 1.5e-4,
    "Mild steel": 4.5e-5,
    "Aluminium": 1.8e-6,
    "PVC": 5e-7,
}

_MATERIAL_SYNONYMS: dict[str, tuple[str, ...]] = {
    "Galvanised steel": ("galvanised steel", "galvanized steel", "galvanised", "galvanized"),
    "Mild steel": ("mild steel", "carbon steel", "steel"),
    "Aluminium": ("aluminium", "aluminum"),
    "PVC": ("pvc", "upvc"),
}
_ALIASES: dict[str, str] = {
    alias: canonical for canonical, aliases in _MATERIAL_SYNONYMS.items() for alias in aliases
}


def available_materials() -> tuple[str, ...]:
    return tuple(ROUGHNESS)


def canonical_material(material: str) -> str | None:
    """Canonical table name for `material`, or None when it is not known."""
    if material in ROUGHNESS:
        return material
    return _ALIASES.get(material.strip().lower())


def roughness(material: str) -> float:
    """
    Absolute roughness [m] of `material`.

    Unknown materials fall back to galvanised steel, the roughest entry in the table.
    """
    canonical = canonical_material(material)
    if canonical is None:
        logger.warning(
            "Unknown duct material '%s', using %s roughness (%.1e m)",
            material,
            DEFAULT_MATERIAL,
            ROUGHNESS[DEFAULT_MATERIAL],
        )
        return ROUGHNESS[DEFAULT_MATERIAL]
    return ROUGHNESS[canonical]


__all__ = ["DEFAULT_MATERIAL", "ROUGHNESS", "available_materials", "canonical_material", "roughness"]
