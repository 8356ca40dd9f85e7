"""JSON (de)serialisation of the domain dataclasses.

Pydantic ``TypeAdapter``s validate at every storage and file boundary so a
malformed document fails loudly instead of producing half-built objects.
"""

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")


@lru_cache(maxsize=None)
def adapter_for(cls: type) -> TypeAdapter:
    return TypeAdapter(cls)


def to_document(obj: Any) -> dict:
    """Dump a dataclass to a JSON-ready dict with camelCase keys."""
    return adapter_for(type(obj)).dump_python(obj, mode="json", by_alias=True)


def from_document(cls: type[T], data: Any) -> T:
    """Validate a dict (camelCase keys) into a dataclass instance.

    Raises:
        pydantic.ValidationError: If the document does not match ``cls``.
    """
    return adapter_for(cls).validate_python(data)


def to_json(obj: Any) -> str:
    return adapter_for(type(obj)).dump_json(obj, by_alias=True).decode("utf-8")


def from_json(cls: type[T], raw: str | bytes) -> T:
    return adapter_for(cls).validate_json(raw)
