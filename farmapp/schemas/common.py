"""Helpers shared by the partial-update schemas."""

from typing import Any

from pydantic import field_validator


def non_nullable(*fields: str) -> Any:
    """
    Validator for update schemas: the listed fields may be omitted but not sent
    as null, since their columns are NOT NULL. Fields left out stay clearable.
    """

    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("may be omitted but cannot be null")
        return v

    return field_validator(*fields)(reject_null)
