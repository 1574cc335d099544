"""
Value Objects for the catalog search domain.

Value objects are immutable and defined by their attributes.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

from .errors import DomainValidationError


@dataclass(frozen=True)
class FilterValue:
    """
    A value a filter definition can accept.

    Attributes:
        id: Value identifier sent by clients (alias or range id).
        display_value: Human-readable label.
        lower: Inclusive lower bound for range values.
        upper: Exclusive upper bound for range values.
    """
    id: str
    display_value: str = ""
    lower: Optional[Decimal] = None
    upper: Optional[Decimal] = None

    def __post_init__(self) -> None:
        """Validate value constraints."""
        if not self.id:
            raise DomainValidationError("Filter value id cannot be empty")
        if (
            self.lower is not None
            and self.upper is not None
            and self.lower > self.upper
        ):
            raise DomainValidationError(
                f"Filter value '{self.id}' lower bound exceeds upper bound"
            )

    @property
    def is_range(self) -> bool:
        """Whether the value carries range bounds."""
        return self.lower is not None or self.upper is not None

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "display_value": self.display_value,
            "lower": str(self.lower) if self.lower is not None else None,
            "upper": str(self.upper) if self.upper is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FilterValue":
        """Build a value from its dictionary representation."""
        lower = data.get("lower")
        upper = data.get("upper")
        return cls(
            id=data["id"],
            display_value=data.get("display_value") or "",
            lower=Decimal(str(lower)) if lower is not None else None,
            upper=Decimal(str(upper)) if upper is not None else None,
        )


@dataclass(frozen=True)
class KeyValues:
    """
    A parsed term or facet group: one key and its distinct values.

    Attributes:
        key: Group key as sent by the client (case preserved).
        values: Distinct values in first-seen order.
    """
    key: str
    values: tuple[str, ...] = ()


class SortDataType(str, Enum):
    """How the engine should interpret a sort field."""

    DEFAULT = "default"
    DOUBLE = "double"


@dataclass(frozen=True)
class SortField:
    """
    A single field of a sort specification.

    Attributes:
        name: Index field name.
        is_descending: Sort direction.
        data_type: Field data type hint for the engine.
        ignore_if_field_missing: Do not fail when documents lack the field.
    """
    name: str
    is_descending: bool = False
    data_type: SortDataType = SortDataType.DEFAULT
    ignore_if_field_missing: bool = False

    def __post_init__(self) -> None:
        """Validate sort field constraints."""
        if not self.name:
            raise DomainValidationError("Sort field name cannot be empty")

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "is_descending": self.is_descending,
            "data_type": self.data_type.value,
            "ignore_if_field_missing": self.ignore_if_field_missing,
        }


@dataclass(frozen=True)
class SortSpec:
    """
    Ordered list of sort fields.

    Only the price sort produces more than one field (one per pricelist).
    """
    fields: tuple[SortField, ...] = field(default_factory=tuple)

    @classmethod
    def by(cls, name: str, is_descending: bool = False) -> "SortSpec":
        """Sort by a single named field."""
        return cls(fields=(SortField(name=name, is_descending=is_descending),))

    @property
    def is_empty(self) -> bool:
        """Whether no sort field is set (engine default ordering)."""
        return not self.fields

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {"fields": [f.to_dict() for f in self.fields]}
