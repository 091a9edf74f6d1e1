"""Identity of incoming child entities: existing row or new row."""

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Existing:
    """The client refers to a row it already knows by id."""

    id: int


class New:
    """The client wants a fresh row created."""

    _instance: "New | None" = None

    def __new__(cls) -> "New":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NEW"


NEW = New()

Identity = Union[Existing, New]


def classify(value: Any) -> Identity:
    """Classify a client-supplied identifier.

    A positive whole number, given as an int, a float with no fractional
    part (``5.0``) or a string of digits, is ``Existing``. Anything else
    (missing, null, fractional, non-numeric, zero or negative) is ``NEW``.
    Never raises.
    """
    if isinstance(value, bool):
        return NEW
    if isinstance(value, int):
        return Existing(value) if value > 0 else NEW
    if isinstance(value, float) and value.is_integer():
        return Existing(int(value)) if value > 0 else NEW
    if isinstance(value, str) and value.isascii() and value.isdigit():
        number = int(value)
        return Existing(number) if number > 0 else NEW
    return NEW
