"""Exception hierarchy for the BioCyc object mapper."""

from __future__ import annotations

from typing import Any


class BioCycError(Exception):
    """Base class for every error raised by this package."""


class InvalidIdentifier(BioCycError, ValueError):
    """Raised when text is not a valid ``orgid:frameid`` identifier."""

    def __init__(self, message: str, text: Any = None) -> None:
        super().__init__(message)
        self.text = text


class ObjectInvalid(BioCycError):
    """Raised when a required field is missing from a record's XML node.

    Attributes:
        model: The record class being parsed
        name: The field name that could not be populated
        node: The XML element the field was read from
    """

    def __init__(self, message: str, model: type | None = None, name: str | None = None, node: Any = None) -> None:
        super().__init__(message)
        self.model = model
        self.name = name
        self.node = node


class ObjectNotFound(BioCycError):
    """Raised when a fetched document holds no record for the requested identity."""

    def __init__(self, message: str, identity: Any = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.identity = identity
        self.detail = detail

    @property
    def orgid(self) -> str | None:
        return self.identity.realm if self.identity is not None else None

    @property
    def frameid(self) -> str | None:
        return self.identity.frame if self.identity is not None else None


class UnknownRecordKind(BioCycError, LookupError):
    """Raised when no record kind is registered under a name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown record kind {name!r}")
        self.name = name
