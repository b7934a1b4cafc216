"""Vehicle fitment selector.

Four dependent fields (year -> make -> model -> engine) with save/clear and
a local-cache copy of the last saved vehicle. The owner of the selector is
told about every saved or cleared vehicle through ``on_change``.
"""
import inspect
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError

from storefront.cache import SELECTED_VEHICLE_KEY, LocalCache
from storefront.logging import get_logger

from .data import ENGINES, FIRST_YEAR, MAKES, available_years, current_year, models_of
from .models import VehicleSelection

logger = get_logger(__name__)

VehicleCallback = Callable[[Optional[VehicleSelection]], Optional[Awaitable[None]]]


class VehicleSelector:
    """
    Year/make/model/engine selection state.

    Transitions:
    - a different make clears model and engine
    - a different model clears engine
    - year changes never clear anything
    """

    def __init__(
        self,
        cache: LocalCache,
        on_change: VehicleCallback | None = None,
        selected_vehicle: VehicleSelection | None = None,
        compact: bool = False,
    ):
        self.cache = cache
        self.on_change = on_change
        self.selected_vehicle = selected_vehicle
        self.compact = compact
        self.expanded = not compact

        self.year: int | None = None
        self.make: str | None = None
        self.model: str | None = None
        self.engine: str | None = None
        if selected_vehicle is not None:
            self._adopt(selected_vehicle)

    # ==================== FIELD SETTERS ====================

    def set_year(self, year: int | None) -> None:
        if year is not None:
            if not isinstance(year, int) or isinstance(year, bool):
                raise ValueError("year must be an integer")
            if not FIRST_YEAR <= year <= current_year():
                raise ValueError(f"year must be between {FIRST_YEAR} and {current_year()}")
        self.year = year

    def set_make(self, make: str | None) -> None:
        if make is not None and make not in MAKES:
            raise ValueError(f"Unknown make: {make}")
        if make != self.make:
            self.model = None
            self.engine = None
        self.make = make

    def set_model(self, model: str | None) -> None:
        if model is not None and model not in models_of(self.make):
            raise ValueError(f"Unknown model for {self.make or 'no make'}: {model}")
        if model != self.model:
            self.engine = None
        self.model = model

    def set_engine(self, engine: str | None) -> None:
        if engine is not None and engine not in ENGINES:
            raise ValueError(f"Unknown engine: {engine}")
        self.engine = engine

    # ==================== GATING ====================

    @property
    def can_select_make(self) -> bool:
        return self.year is not None

    @property
    def can_select_model(self) -> bool:
        return self.make is not None

    @property
    def can_select_engine(self) -> bool:
        return self.model is not None

    @property
    def can_save(self) -> bool:
        return self.year is not None and bool(self.make) and bool(self.model)

    @property
    def can_clear(self) -> bool:
        return any(v is not None for v in (self.year, self.make, self.model, self.engine))

    @property
    def available_models(self) -> list[str]:
        return models_of(self.make)

    # ==================== ACTIONS ====================

    async def save(self) -> VehicleSelection | None:
        """Save the current fields. Does nothing unless year, make and model are set."""
        if not self.can_save:
            return None

        vehicle = VehicleSelection(year=self.year, make=self.make, model=self.model, engine=self.engine or None)
        self.selected_vehicle = vehicle
        await self._emit(vehicle)
        await self.cache.set(SELECTED_VEHICLE_KEY, vehicle.to_json())

        if self.compact:
            self.expanded = False
        return vehicle

    async def clear(self) -> None:
        self._reset_fields()
        self.selected_vehicle = None
        await self._emit(None)
        await self.cache.remove(SELECTED_VEHICLE_KEY)

    async def load_cached(self) -> VehicleSelection | None:
        """
        Adopt the cached vehicle when none was supplied by the owner.

        A cached value that does not parse is dropped from the cache and
        the selector stays empty.
        """
        if self.selected_vehicle is not None:
            return None

        try:
            raw = await self.cache.get(SELECTED_VEHICLE_KEY)
        except Exception as e:
            logger.warning("Failed to read saved vehicle: %s", type(e).__name__)
            return None
        if not raw:
            return None

        try:
            vehicle = VehicleSelection.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding malformed saved vehicle: %d errors", e.error_count())
            self._reset_fields()
            await self.cache.remove(SELECTED_VEHICLE_KEY)
            return None

        self._adopt(vehicle)
        self.selected_vehicle = vehicle
        await self._emit(vehicle)
        return vehicle

    # ==================== DISPLAY ====================

    def expand(self) -> None:
        self.expanded = True

    @property
    def show_badge(self) -> bool:
        """Compact mode shows a one-line badge instead of the form once a vehicle is chosen."""
        return self.compact and self.selected_vehicle is not None and not self.expanded

    @property
    def label(self) -> str | None:
        return self.selected_vehicle.label if self.selected_vehicle else None

    def state(self) -> dict:
        return {
            "year": self.year,
            "make": self.make,
            "model": self.model,
            "engine": self.engine,
            "can_save": self.can_save,
            "can_clear": self.can_clear,
            "expanded": self.expanded,
            "show_badge": self.show_badge,
            "selected_vehicle": self.selected_vehicle.to_dict() if self.selected_vehicle else None,
        }

    # ==================== INTERNALS ====================

    def _adopt(self, vehicle: VehicleSelection) -> None:
        # Cached/supplied values are taken as-is, without re-checking the dataset
        self.year = vehicle.year
        self.make = vehicle.make or None
        self.model = vehicle.model or None
        self.engine = vehicle.engine or None

    def _reset_fields(self) -> None:
        self.year = None
        self.make = None
        self.model = None
        self.engine = None

    async def _emit(self, vehicle: VehicleSelection | None) -> None:
        if self.on_change is None:
            return
        result = self.on_change(vehicle)
        if inspect.isawaitable(result):
            await result


def vehicle_options(year: int | None = None, make: str | None = None, model: str | None = None) -> dict:
    """Choices offered at each level given what is already picked."""
    make_models = models_of(make)
    return {
        "years": available_years(),
        "makes": list(MAKES) if year is not None else [],
        "models": make_models,
        "engines": list(ENGINES) if model and model in make_models else [],
    }
