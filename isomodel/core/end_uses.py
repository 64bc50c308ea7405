"""
End uses and fuel types.

Every energy quantity the engine reports belongs to exactly one end use
(heating, cooling, lighting, ...) and, through a per-building mapping table,
to exactly one fuel type (electricity, natural gas, district energy, ...).

Both enumerations are closed and their declaration order is the canonical
reporting order. ``END_USES`` and ``FUEL_TYPES`` are module-level tuples built
once at import; nothing in the package mutates them, so concurrent runs can
share them freely.

Typical office breakdown (kWh/m²/year, temperate climate):
- Heating: 20-60
- Cooling: 5-25
- Interior lighting: 15-30
- Interior equipment: 20-40
- Fans + pumps: 5-15
- Hot water: 3-8
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Tuple


class EndUse(Enum):
    """Energy end-use categories."""
    HEATING = "heating"
    COOLING = "cooling"
    INTERIOR_LIGHTING = "interior_lighting"
    EXTERIOR_LIGHTING = "exterior_lighting"
    INTERIOR_EQUIPMENT = "interior_equipment"
    FANS = "fans"
    PUMPS = "pumps"
    WATER_SYSTEMS = "water_systems"       # Domestic hot water

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class FuelType(Enum):
    """Energy carriers delivering energy to an end use."""
    ELECTRICITY = "electricity"
    NATURAL_GAS = "natural_gas"
    DISTRICT_HEATING = "district_heating"
    DISTRICT_COOLING = "district_cooling"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


# Canonical iteration order for reporting
END_USES: Tuple[EndUse, ...] = tuple(EndUse)
FUEL_TYPES: Tuple[FuelType, ...] = tuple(FuelType)


# =============================================================================
# Physically possible carriers per end use
# =============================================================================

_ELECTRIC_ONLY = frozenset({FuelType.ELECTRICITY, FuelType.OTHER})

ALLOWED_FUEL_TYPES: Mapping[EndUse, FrozenSet[FuelType]] = MappingProxyType({
    EndUse.HEATING: frozenset({
        FuelType.ELECTRICITY,
        FuelType.NATURAL_GAS,
        FuelType.DISTRICT_HEATING,
        FuelType.OTHER,
    }),
    # Gas-fired absorption chillers exist; district heat does not cool
    EndUse.COOLING: frozenset({
        FuelType.ELECTRICITY,
        FuelType.NATURAL_GAS,
        FuelType.DISTRICT_COOLING,
        FuelType.OTHER,
    }),
    EndUse.INTERIOR_LIGHTING: _ELECTRIC_ONLY,
    EndUse.EXTERIOR_LIGHTING: _ELECTRIC_ONLY,
    EndUse.INTERIOR_EQUIPMENT: frozenset({
        FuelType.ELECTRICITY,
        FuelType.NATURAL_GAS,
        FuelType.OTHER,
    }),
    EndUse.FANS: _ELECTRIC_ONLY,
    EndUse.PUMPS: _ELECTRIC_ONLY,
    EndUse.WATER_SYSTEMS: frozenset({
        FuelType.ELECTRICITY,
        FuelType.NATURAL_GAS,
        FuelType.DISTRICT_HEATING,
        FuelType.OTHER,
    }),
})


def default_fuel_types() -> Dict[EndUse, FuelType]:
    """
    Fresh fuel mapping for a new building.

    Gas heating and hot water, everything else electric. Returns a new dict on
    every call: the mapping belongs to the building, not to the module.
    """
    mapping = {end_use: FuelType.ELECTRICITY for end_use in END_USES}
    mapping[EndUse.HEATING] = FuelType.NATURAL_GAS
    mapping[EndUse.WATER_SYSTEMS] = FuelType.NATURAL_GAS
    return mapping


# =============================================================================
# Loose-string parsing (translator input, IDF fuel names)
# =============================================================================

FUEL_TYPE_ALIASES: Mapping[str, FuelType] = MappingProxyType({
    "electricity": FuelType.ELECTRICITY,
    "electric": FuelType.ELECTRICITY,
    "elec": FuelType.ELECTRICITY,
    "el": FuelType.ELECTRICITY,
    "naturalgas": FuelType.NATURAL_GAS,
    "gas": FuelType.NATURAL_GAS,
    "naturgas": FuelType.NATURAL_GAS,
    "districtheating": FuelType.DISTRICT_HEATING,
    "districtheatingwater": FuelType.DISTRICT_HEATING,
    "districtheatingsteam": FuelType.DISTRICT_HEATING,
    "fjärrvärme": FuelType.DISTRICT_HEATING,
    "districtcooling": FuelType.DISTRICT_COOLING,
    "fjärrkyla": FuelType.DISTRICT_COOLING,
    "other": FuelType.OTHER,
    "otherfuel1": FuelType.OTHER,
    "otherfuel2": FuelType.OTHER,
    "fueloil": FuelType.OTHER,
    "fueloilno1": FuelType.OTHER,
    "fueloilno2": FuelType.OTHER,
    "propane": FuelType.OTHER,
    "biomass": FuelType.OTHER,
    "none": FuelType.OTHER,
})


def _normalize(text: str) -> str:
    return "".join(ch for ch in text.lower() if ch.isalnum())


def parse_fuel_type(text) -> FuelType:
    """
    Map a loosely-typed fuel name onto ``FuelType``.

    Accepts enum members, enum values ("natural_gas") and the spellings used
    by EnergyPlus and common tools ("NaturalGas", "District Heating Water").

    Raises:
        ValueError: for names that match no fuel type
    """
    if isinstance(text, FuelType):
        return text
    if not isinstance(text, str) or not text.strip():
        raise ValueError(f"Fuel type must be a non-empty string, got {text!r}")

    key = _normalize(text)
    if key in FUEL_TYPE_ALIASES:
        return FUEL_TYPE_ALIASES[key]

    raise ValueError(
        f"Unknown fuel type '{text}'. Valid: {', '.join(f.value for f in FUEL_TYPES)}"
    )
