"""Trait profile derivation from birth dates."""

from .traits import (
    ZodiacSign,
    TraitGroup,
    TraitProfile,
    parse_birth_date,
    derive_sign,
    derive_trait_group,
    derive_profile,
)

__all__ = [
    "ZodiacSign",
    "TraitGroup",
    "TraitProfile",
    "parse_birth_date",
    "derive_sign",
    "derive_trait_group",
    "derive_profile",
]
