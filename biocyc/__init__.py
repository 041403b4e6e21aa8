"""
BioCyc - typed, lazily cross-referenced access to BioCyc web-service objects
"""

__version__ = "0.1.0"

from biocyc.cache import ObjectCache, get_cache, set_cache
from biocyc.errors import (
    BioCycError,
    InvalidIdentifier,
    ObjectInvalid,
    ObjectNotFound,
    UnknownRecordKind,
)
from biocyc.fields import Attr, Reference
from biocyc.identity import Identity
from biocyc.quantity import Quantity
from biocyc.records import Entity, Record, registry
from biocyc import models

__all__ = [
    "Attr",
    "BioCycError",
    "Entity",
    "Identity",
    "InvalidIdentifier",
    "ObjectCache",
    "ObjectInvalid",
    "ObjectNotFound",
    "Quantity",
    "Record",
    "Reference",
    "UnknownRecordKind",
    "get_cache",
    "models",
    "registry",
    "set_cache",
]
