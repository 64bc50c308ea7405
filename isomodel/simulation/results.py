"""
Simulation results - monthly delivered energy by end use and fuel type.

All values are area-normalized (kWh/m² of conditioned floor area). Absolute
values are obtained through ``Results.absolute_*``, which multiply by the
floor-area snapshot of the run.

Lookups never fail for a valid enumeration member: an end use or fuel type
the building does not use simply reports 0.0.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Tuple

from ..core.end_uses import EndUse, FuelType, END_USES, FUEL_TYPES


@dataclass(frozen=True)
class MonthlyResult:
    """Delivered energy for one calendar month (kWh/m²)."""
    month: int
    end_uses: Mapping[EndUse, float]
    fuel_types: Mapping[EndUse, FuelType]

    def __post_init__(self):
        values = {end_use: float(self.end_uses.get(end_use, 0.0)) for end_use in END_USES}
        object.__setattr__(self, "end_uses", MappingProxyType(values))
        object.__setattr__(self, "fuel_types", MappingProxyType(dict(self.fuel_types)))

    def get_end_use(self, end_use: EndUse) -> float:
        return self.end_uses[end_use]

    def get_end_use_by_fuel_type(self, fuel_type: FuelType) -> float:
        """Sum of all end uses served by ``fuel_type``."""
        return sum(
            value for end_use, value in self.end_uses.items()
            if self.fuel_types.get(end_use) is fuel_type
        )

    def get_end_use_for(self, end_use: EndUse, fuel_type: FuelType) -> float:
        """Energy of ``end_use`` if it is served by ``fuel_type``, else 0."""
        if self.fuel_types.get(end_use) is not fuel_type:
            return 0.0
        return self.end_uses[end_use]

    def by_fuel_type(self) -> Dict[FuelType, float]:
        """Fuel type -> energy, in canonical fuel order."""
        return {fuel: self.get_end_use_by_fuel_type(fuel) for fuel in FUEL_TYPES}

    @property
    def total(self) -> float:
        return sum(self.end_uses.values())

    def to_dict(self) -> Dict:
        return {
            "month": self.month,
            "end_uses_kwh_m2": {e.value: v for e, v in self.end_uses.items()},
            "fuel_types_kwh_m2": {f.value: v for f, v in self.by_fuel_type().items()},
            "total_kwh_m2": self.total,
        }


@dataclass(frozen=True)
class Results:
    """
    Twelve monthly results plus the floor area of the run.

    Usage:
        results = sim_model.simulate()
        print(f"EUI: {results.total_energy_use:.1f} kWh/m²")
        heating_jan = results[1].get_end_use(EndUse.HEATING)
        gas = results.annual_by_fuel_type(FuelType.NATURAL_GAS)
    """
    monthly_results: Tuple[MonthlyResult, ...]
    floor_area: float                           # m²
    name: str = ""

    def __post_init__(self):
        monthly = tuple(self.monthly_results)
        if [r.month for r in monthly] != list(range(1, 13)):
            raise ValueError("Results require twelve monthly results ordered 1-12")
        object.__setattr__(self, "monthly_results", monthly)

    def __getitem__(self, month: int) -> MonthlyResult:
        """Result for calendar month 1-12."""
        if not 1 <= month <= 12:
            raise KeyError(f"Month must be 1-12, got {month}")
        return self.monthly_results[month - 1]

    def __iter__(self) -> Iterator[MonthlyResult]:
        return iter(self.monthly_results)

    def __len__(self) -> int:
        return len(self.monthly_results)

    @property
    def total_energy_use(self) -> float:
        """Energy-use intensity (kWh/m²·yr)."""
        return sum(r.total for r in self.monthly_results)

    def annual_end_use(self, end_use: EndUse) -> float:
        return sum(r.get_end_use(end_use) for r in self.monthly_results)

    def annual_by_fuel_type(self, fuel_type: FuelType) -> float:
        return sum(r.get_end_use_by_fuel_type(fuel_type) for r in self.monthly_results)

    def end_use_breakdown(self) -> Dict[EndUse, float]:
        """Annual kWh/m² per end use, in canonical order."""
        return {end_use: self.annual_end_use(end_use) for end_use in END_USES}

    def fuel_breakdown(self) -> Dict[FuelType, float]:
        """Annual kWh/m² per fuel type, in canonical order."""
        return {fuel: self.annual_by_fuel_type(fuel) for fuel in FUEL_TYPES}

    # Absolute values (kWh)

    def absolute_total_energy_use(self) -> float:
        return self.total_energy_use * self.floor_area

    def absolute_end_use(self, end_use: EndUse) -> float:
        return self.annual_end_use(end_use) * self.floor_area

    def absolute_by_fuel_type(self, fuel_type: FuelType) -> float:
        return self.annual_by_fuel_type(fuel_type) * self.floor_area

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "floor_area_m2": self.floor_area,
            "intensity_kwh_m2": {
                "total": self.total_energy_use,
                "end_uses": {e.value: v for e, v in self.end_use_breakdown().items()},
                "fuel_types": {f.value: v for f, v in self.fuel_breakdown().items()},
            },
            "energy_kwh": {
                "total": self.absolute_total_energy_use(),
                "fuel_types": {
                    f.value: self.absolute_by_fuel_type(f) for f in FUEL_TYPES
                },
            },
            "monthly": [r.to_dict() for r in self.monthly_results],
        }
