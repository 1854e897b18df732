from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

from ..config import PLACEHOLDER_TEMPLATE

Tier = Literal["direct", "repaired", "regex", "empty"]


@dataclass(frozen=True)
class FieldSchema:
    fields: tuple[str, ...]
    array_fields: frozenset[str] = frozenset()
    optional_fields: frozenset[str] = frozenset()

    @classmethod
    def of(
        cls,
        fields: Iterable[str],
        arrays: Iterable[str] = (),
        optional: Iterable[str] = (),
    ) -> "FieldSchema":
        names = tuple(dict.fromkeys(fields))
        array_fields = frozenset(arrays)
        optional_fields = frozenset(optional)
        unknown = (array_fields | optional_fields) - set(names)
        if unknown:
            raise ValueError(f"array/optional fields not in schema: {sorted(unknown)}")
        return cls(names, array_fields, optional_fields)

    def is_array(self, name: str) -> bool:
        return name in self.array_fields

    def neutral_default(self, name: str) -> Any:
        if name in self.array_fields:
            return []
        if name in self.optional_fields:
            return ""
        return placeholder(name)


@dataclass
class Normalized:
    values: dict[str, Any]
    tier: Tier
    reasons: list[str] = field(default_factory=list)


def placeholder(name: str) -> str:
    return PLACEHOLDER_TEMPLATE.format(field=name)


def is_placeholder(value: Any, name: str) -> bool:
    return isinstance(value, str) and value == placeholder(name)
