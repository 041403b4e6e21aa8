"""Scalar decoders for raw XML leaf nodes.

Each type casts one XPath result (an attribute value or a text node, as
returned by lxml "smart strings") into a Python value. The module-level
registry maps the tags used in field declarations (``"string"``,
``"integer"``, ...) to type instances.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from lxml import etree

from biocyc.quantity import Quantity


class String:
    """Trimmed text of an attribute, text or CDATA node."""

    name = "string"

    def cast(self, node: Any) -> Any:
        if node is None:
            return None
        if isinstance(node, etree._Element) or not isinstance(node, (str, bytes)):
            raise TypeError(f"Invalid node type {type(node).__name__}")
        if isinstance(node, bytes):
            node = node.decode("utf-8")
        return str(node).strip()


class Boolean(String):
    name = "boolean"

    def cast(self, node: Any) -> bool:
        return super().cast(node) == "true"


class Integer(String):
    name = "integer"

    def cast(self, node: Any) -> int | None:
        text = super().cast(node)
        return None if text is None else int(text)


class Float(String):
    name = "float"

    def cast(self, node: Any) -> float | None:
        text = super().cast(node)
        return None if text is None else float(text)


class Date(String):
    """``YYYY-MM-DD`` dates."""

    name = "date"

    def cast(self, node: Any) -> date | None:
        text = super().cast(node)
        if text is None:
            return None
        return datetime.strptime(text, "%Y-%m-%d").date()


def _parent_units(node: Any) -> str | None:
    # lxml smart strings know the element they were read from
    getparent = getattr(node, "getparent", None)
    parent = getparent() if getparent is not None else None
    if parent is None:
        return None
    return parent.get("units")


class IntegerWithUnits(Integer):
    name = "integer_with_units"

    def cast(self, node: Any) -> Quantity | None:
        value = super().cast(node)
        if value is None:
            return None
        return Quantity(value, _parent_units(node))


class FloatWithUnits(Float):
    name = "float_with_units"

    def cast(self, node: Any) -> Quantity | None:
        value = super().cast(node)
        if value is None:
            return None
        return Quantity(value, _parent_units(node))


class TypeRegistry:
    """Named scalar types available to field declarations."""

    def __init__(self) -> None:
        self._registrations: dict[str, String] = {}

    def register(self, name: str, type_: String) -> TypeRegistry:
        self._registrations[name] = type_
        return self

    def lookup(self, name: str) -> String:
        try:
            return self._registrations[name]
        except KeyError:
            raise ValueError(f"Unknown type {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._registrations

    def names(self) -> list[str]:
        return sorted(self._registrations)


registry = TypeRegistry()
for _type in (String(), Boolean(), Integer(), Float(), Date(), IntegerWithUnits(), FloatWithUnits()):
    registry.register(_type.name, _type)


def register(name: str, type_: String) -> TypeRegistry:
    return registry.register(name, type_)


def lookup(name: str) -> String:
    return registry.lookup(name)


def cast(name: str, node: Any) -> Any:
    """Cast *node* with the type registered as *name*."""
    return registry.lookup(name).cast(node)
