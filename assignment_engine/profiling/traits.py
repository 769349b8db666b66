"""
Trait profile derivation from birth dates.

This module maps a birth date to one of twelve sign labels using a fixed
month/day boundary table, and reduces the sign to one of four trait groups.

Key Design Decisions:
- The sign is an opaque categorical feature, not an astronomical computation
- An absent birth date yields None at every level; callers handle it
- Malformed date strings are rejected here, before any scoring happens
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from ..exceptions import InvalidInputError

logger = logging.getLogger(__name__)

BirthDateInput = Union[date, datetime, str, None]


class ZodiacSign(Enum):
    """Twelve sign labels in calendar order starting at the spring boundary."""
    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"


class TraitGroup(Enum):
    """Four trait groups, three signs each."""
    FIRE = "Fire"
    EARTH = "Earth"
    AIR = "Air"
    WATER = "Water"


# (sign, (start_month, start_day), (end_month, end_day)), both ends inclusive.
# Pisces is the fall-through case and is not listed.
SIGN_BOUNDARIES = (
    (ZodiacSign.ARIES, (3, 21), (4, 19)),
    (ZodiacSign.TAURUS, (4, 20), (5, 20)),
    (ZodiacSign.GEMINI, (5, 21), (6, 20)),
    (ZodiacSign.CANCER, (6, 21), (7, 22)),
    (ZodiacSign.LEO, (7, 23), (8, 22)),
    (ZodiacSign.VIRGO, (8, 23), (9, 22)),
    (ZodiacSign.LIBRA, (9, 23), (10, 22)),
    (ZodiacSign.SCORPIO, (10, 23), (11, 21)),
    (ZodiacSign.SAGITTARIUS, (11, 22), (12, 21)),
    (ZodiacSign.CAPRICORN, (12, 22), (1, 19)),
    (ZodiacSign.AQUARIUS, (1, 20), (2, 18)),
)

SIGN_TO_GROUP = {
    ZodiacSign.ARIES: TraitGroup.FIRE,
    ZodiacSign.LEO: TraitGroup.FIRE,
    ZodiacSign.SAGITTARIUS: TraitGroup.FIRE,
    ZodiacSign.TAURUS: TraitGroup.EARTH,
    ZodiacSign.VIRGO: TraitGroup.EARTH,
    ZodiacSign.CAPRICORN: TraitGroup.EARTH,
    ZodiacSign.GEMINI: TraitGroup.AIR,
    ZodiacSign.LIBRA: TraitGroup.AIR,
    ZodiacSign.AQUARIUS: TraitGroup.AIR,
    ZodiacSign.CANCER: TraitGroup.WATER,
    ZodiacSign.SCORPIO: TraitGroup.WATER,
    ZodiacSign.PISCES: TraitGroup.WATER,
}


@dataclass(frozen=True)
class TraitProfile:
    """
    Derived comparability profile for one person.

    Attributes:
        sign: Sign label, or None when the birth date is unknown
        group: Trait group, or None when the birth date is unknown
    """
    sign: Optional[ZodiacSign] = None
    group: Optional[TraitGroup] = None

    @property
    def is_known(self) -> bool:
        return self.group is not None

    def describe(self) -> str:
        """Short label such as 'Leo (Fire)', or 'unknown'."""
        if self.sign is None or self.group is None:
            return "unknown"
        return f"{self.sign.value} ({self.group.value})"


def parse_birth_date(value: BirthDateInput) -> Optional[date]:
    """
    Normalize a birth date input to a date.

    Args:
        value: date, datetime, ISO-8601 string (time part allowed) or None

    Returns:
        date instance, or None when the input is None or an empty string

    Raises:
        InvalidInputError: If a string cannot be parsed as an ISO date
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            raise InvalidInputError(f"Malformed birth date: {value!r}")
    raise InvalidInputError(f"Unsupported birth date type: {type(value).__name__}")


def derive_sign(birth_date: BirthDateInput) -> Optional[ZodiacSign]:
    """
    Look up the sign for a birth date.

    Args:
        birth_date: Birth date or None

    Returns:
        ZodiacSign, or None if the birth date is absent
    """
    parsed = parse_birth_date(birth_date)
    if parsed is None:
        return None

    month, day = parsed.month, parsed.day
    for sign, (start_month, start_day), (end_month, end_day) in SIGN_BOUNDARIES:
        if (month == start_month and day >= start_day) or (month == end_month and day <= end_day):
            return sign
    return ZodiacSign.PISCES


def derive_trait_group(birth_date: BirthDateInput) -> Optional[TraitGroup]:
    """
    Reduce a birth date to its trait group.

    Args:
        birth_date: Birth date or None

    Returns:
        TraitGroup, or None if the birth date is absent
    """
    sign = derive_sign(birth_date)
    if sign is None:
        return None
    return SIGN_TO_GROUP[sign]


def derive_profile(birth_date: BirthDateInput) -> TraitProfile:
    """Derive both sign and group for a birth date."""
    sign = derive_sign(birth_date)
    if sign is None:
        return TraitProfile()
    return TraitProfile(sign=sign, group=SIGN_TO_GROUP[sign])
