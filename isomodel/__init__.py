"""
isomodel - monthly quasi-steady-state building energy simulation (ISO 13790).

    DetailedBuilding --ForwardTranslator--> UserModel --compile_model()--> SimModel
    SimModel.simulate() --> Results (12 months, kWh/m² by end use and fuel type)

Usage:
    from isomodel import ForwardTranslator, ClimateLibrary

    user_model = ForwardTranslator().translate(building)
    results = user_model.to_sim_model(library=climates).simulate()
    print(f"EUI: {results.total_energy_use:.1f} kWh/m²")
"""

__version__ = "0.1.0"

from .core.config import Settings, settings
from .core.end_uses import EndUse, FuelType, END_USES, FUEL_TYPES
from .core.user_model import UserModel
from .climate import ClimateLibrary, ClimateSummary, MonthlyClimate
from .geometry import Orientation, TerrainClass
from .schedules import MonthlySchedule, Schedules
from .simulation import MonthlyResult, Results, SimModel, compile_model
from .translate import DetailedBuilding, ForwardTranslator, TranslationError
from .utils.validation import ValidationError

__all__ = [
    "__version__",
    "Settings",
    "settings",
    "EndUse",
    "FuelType",
    "END_USES",
    "FUEL_TYPES",
    "UserModel",
    "ClimateLibrary",
    "ClimateSummary",
    "MonthlyClimate",
    "Orientation",
    "TerrainClass",
    "MonthlySchedule",
    "Schedules",
    "MonthlyResult",
    "Results",
    "SimModel",
    "compile_model",
    "DetailedBuilding",
    "ForwardTranslator",
    "TranslationError",
    "ValidationError",
]
