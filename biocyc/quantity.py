"""Dimensioned quantities read from ``units``-annotated XML values."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Quantity:
    """A numeric value with optional units (e.g. ``Quantity(75.07, "Da")``)."""

    value: int | float
    units: str | None = None

    def __str__(self) -> str:
        return " ".join(str(part) for part in (self.value, self.units) if part is not None)
