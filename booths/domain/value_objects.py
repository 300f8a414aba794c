"""Domain primitives that enforce validity at creation time."""

import re
from dataclasses import dataclass
from typing import Self
from uuid import UUID

MIN_CONTACT_DIGITS = 10
MAX_CONTACT_DIGITS = 20
MAX_ADDRESS_LENGTH = 45

_NON_DIGITS = re.compile(r"[^0-9]")


@dataclass(frozen=True)
class BoothId:
    """Unique identifier for a Booth."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OperationId:
    """Unique identifier for a BoothOperation."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OperatorInfo:
    """Operator details captured when an operation starts.

    The name is required. The contact is optional, but when given it must
    contain at least ten digits once everything else is stripped; it is
    stored in that digits-only form.
    """

    name: str
    contact: str | None = None
    email: str | None = None
    organization: str | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        name = (self.name or "").strip()
        if not name:
            raise ValueError("Operator name is required")
        object.__setattr__(self, "name", name)

        if self.contact is not None and self.contact.strip():
            digits = _NON_DIGITS.sub("", self.contact)
            if len(digits) < MIN_CONTACT_DIGITS:
                raise ValueError("Operator contact must have at least 10 digits")
            if len(digits) > MAX_CONTACT_DIGITS:
                raise ValueError("Operator contact must have at most 20 digits")
            object.__setattr__(self, "contact", digits)
        else:
            object.__setattr__(self, "contact", None)

        for field_name in ("email", "organization", "notes"):
            value = getattr(self, field_name)
            object.__setattr__(self, field_name, (value or "").strip() or None)


@dataclass(frozen=True)
class Duration:
    """Elapsed time floored to whole minutes."""

    total_minutes: int

    def __post_init__(self) -> None:
        if self.total_minutes < 0:
            raise ValueError("Duration cannot be negative")

    @property
    def hours(self) -> int:
        return self.total_minutes // 60

    @property
    def minutes(self) -> int:
        return self.total_minutes % 60

    def __str__(self) -> str:
        return f"{self.hours}h {self.minutes}m"
