"""
iNote Backend - Lookup Results
==============================

What:  Two-variant result returned by single-entity service operations.
How:   `Found(value)` wraps the entity; `NotFound(resource, key)` describes
       what was missing. Callers branch with `match`:

        match await note_service.find_by_id(db, note_id):
            case Found(value=note):
                return note
            case NotFound():
                return Response(status_code=404)
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    resource: str
    key: Any

    @property
    def message(self) -> str:
        return f"{self.resource} '{self.key}' was not found"


Result = Union[Found[T], NotFound]
