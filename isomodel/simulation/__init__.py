"""
Simulation Module - compile a reduced model and run the monthly balances.

Features:
- compile_model(): collect-all validation, immutable SimModel
- MonthlyEnergyBalanceEngine: ISO 13790 monthly heat balance
- EndUseAggregator: end use -> fuel type partition
- Results: twelve MonthlyResult records in kWh/m²
"""

from .engine import (
    UtilizationParameters,
    MonthlyEnergyBalance,
    MonthlyEnergyBalanceEngine,
    gain_utilization,
    loss_utilization,
    heating_need,
    cooling_need,
)
from .results import MonthlyResult, Results
from .aggregator import EndUseAggregator
from .sim_model import SimModel, compile_model

__all__ = [
    'UtilizationParameters',
    'MonthlyEnergyBalance',
    'MonthlyEnergyBalanceEngine',
    'gain_utilization',
    'loss_utilization',
    'heating_need',
    'cooling_need',
    'MonthlyResult',
    'Results',
    'EndUseAggregator',
    'SimModel',
    'compile_model',
]
