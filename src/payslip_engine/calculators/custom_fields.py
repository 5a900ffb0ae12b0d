"""Registry of user-defined compensation fields."""

from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from typing import Any, Iterable, Iterator

from payslip_engine.calculators.types import (
    CustomField,
    CustomFieldValue,
    FieldKind,
    NumberValue,
    PayrollInput,
    PercentageValue,
    TextValue,
    to_decimal,
)


class DuplicateFieldError(Exception):
    """Raised when a custom field id is already registered."""

    def __init__(self, field_id: str):
        self.field_id = field_id
        super().__init__(f"Custom field '{field_id}' already exists")


def normalize_name(name: str) -> str:
    """Fold a display name for matching: case, spaces and underscores ignored."""
    return "".join(ch for ch in name.lower() if ch not in " _-\t")


class CustomFieldRegistry:
    """Ordered, in-memory set of custom fields.

    Insertion order is the order in which fields are applied during
    calculation, so percentage fields compound on whatever came before
    them. Mutations are serialized; callers running a batch should work on
    ``snapshot()`` so a concurrent add/remove cannot change the field set
    halfway through.
    """

    def __init__(self, fields: Iterable[CustomField] = ()):
        self._lock = threading.Lock()
        self._fields: list[CustomField] = []
        for f in fields:
            self.add(f)

    @staticmethod
    def generate_id() -> str:
        return f"custom_{uuid.uuid4().hex[:12]}"

    def add(
        self,
        field: CustomField | None = None,
        *,
        name: str | None = None,
        kind: FieldKind | str = FieldKind.NUMBER,
        default_value: str | None = None,
    ) -> CustomField:
        """Append a field, generating an id when none is given."""
        if field is None:
            if not name:
                raise ValueError("Custom field name is required")
            field = CustomField(
                id=self.generate_id(),
                name=name,
                kind=kind,
                default_value=default_value,
            )
        elif not field.id:
            field = replace(field, id=self.generate_id())

        with self._lock:
            if any(f.id == field.id for f in self._fields):
                raise DuplicateFieldError(field.id)
            self._fields.append(field)
        return field

    def remove(self, field_id: str) -> None:
        """Remove a field. Unknown ids are ignored."""
        with self._lock:
            self._fields = [f for f in self._fields if f.id != field_id]

    def update(self, field_id: str, **changes: Any) -> CustomField:
        """Replace name, kind or default of an existing field in place."""
        allowed = {"name", "kind", "default_value"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Cannot update custom field attributes: {sorted(unknown)}")

        with self._lock:
            for i, f in enumerate(self._fields):
                if f.id == field_id:
                    updated = replace(f, **changes)
                    self._fields[i] = updated
                    return updated
        raise KeyError(field_id)

    def get(self, field_id: str) -> CustomField | None:
        with self._lock:
            return next((f for f in self._fields if f.id == field_id), None)

    def find_by_name(self, name: str) -> CustomField | None:
        key = normalize_name(name)
        with self._lock:
            return next((f for f in self._fields if normalize_name(f.name) == key), None)

    def list(self) -> list[CustomField]:
        with self._lock:
            return list(self._fields)

    def snapshot(self) -> tuple[CustomField, ...]:
        with self._lock:
            return tuple(self._fields)

    def clear(self) -> None:
        with self._lock:
            self._fields = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._fields)

    def __iter__(self) -> Iterator[CustomField]:
        return iter(self.snapshot())

    def __contains__(self, field_id: object) -> bool:
        return any(f.id == field_id for f in self.snapshot())


def resolve_value(field: CustomField, raw: Any) -> CustomFieldValue | None:
    """Turn a raw input value into the variant for the field's kind.

    Returns None when nothing was supplied (None or blank string).
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    if field.kind is FieldKind.TEXT:
        return TextValue(str(raw))
    amount = to_decimal(raw, field.name)
    if field.kind is FieldKind.PERCENTAGE:
        return PercentageValue(amount)
    return NumberValue(amount)


def resolve_custom_values(
    fields: Iterable[CustomField], payroll_input: PayrollInput
) -> list[tuple[CustomField, CustomFieldValue]]:
    """Pair each field with its value, in field order.

    A field with no value in the input falls back to its default_value;
    fields with neither are left out.
    """
    resolved: list[tuple[CustomField, CustomFieldValue]] = []
    for f in fields:
        raw = payroll_input.custom_values.get(f.id)
        value = resolve_value(f, raw)
        if value is None:
            value = resolve_value(f, f.default_value)
        if value is not None:
            resolved.append((f, value))
    return resolved
