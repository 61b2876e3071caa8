"""Error values for the return-leg library.

Errors are frozen dataclasses carried inside Err, never raised by the
pricing functions. ReturnLegError is the open base; the subclasses are
@final.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import final

from returnleg.core.types import UtcDatetime


@dataclass(frozen=True, slots=True)
class ReturnLegError:
    """Base error value."""

    message: str
    code: str
    timestamp: UtcDatetime
    source: str  # "module.function" that produced this error

    def with_context(self, context: str) -> ReturnLegError:
        """Return a copy with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "code": self.code,
            "timestamp": self.timestamp.value.isoformat(),
            "source": self.source,
        }


@final
@dataclass(frozen=True, slots=True)
class FieldViolation:
    """A single field validation failure."""

    path: str  # e.g. "feed.events[3].date"
    constraint: str  # e.g. "must be >= previous event date"
    actual_value: str


@final
@dataclass(frozen=True, slots=True)
class ValidationError(ReturnLegError):
    """Schedule, feed or product data failed boundary validation."""

    fields: tuple[FieldViolation, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            **ReturnLegError.to_dict(self),
            "fields": [
                {"path": f.path, "constraint": f.constraint, "actual_value": f.actual_value}
                for f in self.fields
            ],
        }


@final
@dataclass(frozen=True, slots=True)
class MissingObservableError(ReturnLegError):
    """A price or rate observation is not available."""

    observable: str
    as_of: str

    def to_dict(self) -> dict[str, object]:
        return {**ReturnLegError.to_dict(self), "observable": self.observable, "as_of": self.as_of}


@final
@dataclass(frozen=True, slots=True)
class PricingError(ReturnLegError):
    """A payment amount could not be computed."""

    instrument: str
    reason: str

    def to_dict(self) -> dict[str, object]:
        return {**ReturnLegError.to_dict(self), "instrument": self.instrument, "reason": self.reason}


def validation_error(
    message: str,
    code: str,
    source: str,
    fields: tuple[FieldViolation, ...] = (),
) -> ValidationError:
    """Build a ValidationError stamped with the current UTC time."""
    return ValidationError(
        message=message, code=code, timestamp=UtcDatetime.now(),
        source=source, fields=fields,
    )
