"""Fitment reference data: makes, their models, and engine descriptors."""
from datetime import date

FIRST_YEAR = 1990

MODELS_BY_MAKE: dict[str, list[str]] = {
    "Toyota": ["Camry", "Corolla", "RAV4", "Highlander", "Prius"],
    "Honda": ["Civic", "Accord", "CR-V", "Pilot", "Fit"],
    "Ford": ["F-150", "Mustang", "Explorer", "Escape", "Focus"],
    "Chevrolet": ["Silverado", "Malibu", "Equinox", "Tahoe", "Camaro"],
    "Nissan": ["Altima", "Sentra", "Rogue", "Pathfinder", "Maxima"],
    "BMW": ["3 Series", "5 Series", "X3", "X5", "i3"],
    "Mercedes-Benz": ["C-Class", "E-Class", "GLC", "GLE", "A-Class"],
    "Audi": ["A4", "A6", "Q5", "Q7", "A3"],
}

MAKES: list[str] = list(MODELS_BY_MAKE)

# Same list for every model
ENGINES: list[str] = [
    "2.0L 4-Cylinder",
    "2.5L 4-Cylinder",
    "3.0L V6",
    "3.5L V6",
    "5.0L V8",
]


def current_year() -> int:
    return date.today().year


def available_years() -> list[int]:
    """Selectable years, newest first."""
    return list(range(current_year(), FIRST_YEAR - 1, -1))


def models_of(make: str | None) -> list[str]:
    if not make:
        return []
    return list(MODELS_BY_MAKE.get(make, []))
