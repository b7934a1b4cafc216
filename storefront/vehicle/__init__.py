"""Vehicle fitment selection."""
from .data import ENGINES, MAKES, MODELS_BY_MAKE, available_years, models_of
from .models import VehicleSelection
from .selector import VehicleSelector, vehicle_options

__all__ = [
    "ENGINES",
    "MAKES",
    "MODELS_BY_MAKE",
    "available_years",
    "models_of",
    "VehicleSelection",
    "VehicleSelector",
    "vehicle_options",
]
