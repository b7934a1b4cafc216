"""Vehicle selection model."""
from typing import Optional

from pydantic import BaseModel


class VehicleSelection(BaseModel):
    """A saved fitment: year, make and model are required, engine is optional."""
    year: int
    make: str
    model: str
    engine: Optional[str] = None

    @property
    def label(self) -> str:
        text = f"{self.year} {self.make} {self.model}"
        if self.engine:
            text += f" ({self.engine})"
        return text

    def to_json(self) -> str:
        # An absent engine is left out entirely, not written as null
        return self.model_dump_json(exclude_none=True)

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)
