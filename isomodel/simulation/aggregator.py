"""
End-use / fuel-type aggregation of monthly balances into Results.
"""

from types import MappingProxyType
from typing import Mapping, Sequence
import logging

from ..core.end_uses import EndUse, FuelType, END_USES
from .engine import MonthlyEnergyBalance
from .results import MonthlyResult, Results

logger = logging.getLogger(__name__)


class EndUseAggregator:
    """
    Turn twelve MonthlyEnergyBalance records into Results.

    Each end use is assigned to exactly one fuel type through the building's
    own mapping, so per-fuel sums partition the per-end-use sums. Iteration
    always follows the canonical enumeration order.

    Usage:
        aggregator = EndUseAggregator(sim_model.fuel_types)
        results = aggregator.aggregate(balances, sim_model.floor_area)
    """

    def __init__(self, fuel_types: Mapping[EndUse, FuelType]):
        self.fuel_types = MappingProxyType(
            {e: fuel_types[e] for e in END_USES if e in fuel_types}
        )

    def aggregate(
        self,
        balances: Sequence[MonthlyEnergyBalance],
        floor_area: float,
        name: str = "",
    ) -> Results:
        monthly = []
        for balance in sorted(balances, key=lambda b: b.month):
            unmapped = [
                e.value for e in END_USES
                if balance.delivered.get(e, 0.0) > 0.0 and e not in self.fuel_types
            ]
            if unmapped:
                # Compiled models map every active end use; reaching this is a bug
                logger.error(f"Month {balance.month}: no fuel type for {unmapped}")
            monthly.append(MonthlyResult(
                month=balance.month,
                end_uses=balance.delivered,
                fuel_types=self.fuel_types,
            ))

        results = Results(tuple(monthly), floor_area=floor_area, name=name)
        logger.debug(
            f"Aggregated results: {results.total_energy_use:.1f} kWh/m²·yr "
            f"over {floor_area:.0f} m²",
            extra={"building": name},
        )
        return results
