# agentsync Validation Utilities
# Structured parse results for schema-validated data

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@dataclass
class ParseResult(Generic[T]):
    """
    Outcome of parsing untrusted data.

    Either ``ok`` is True and ``value`` holds the parsed object, or ``ok`` is
    False and ``issues`` lists human-readable problems.
    """

    ok: bool
    value: Optional[T] = None
    issues: list[str] = field(default_factory=list)

    @classmethod
    def success(cls, value: T) -> "ParseResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, *issues: str) -> "ParseResult[T]":
        return cls(ok=False, issues=list(issues))

    @property
    def error(self) -> str:
        """All issues joined into one line."""
        return ", ".join(self.issues)


def format_validation_error(error: ValidationError) -> list[str]:
    """
    Flatten a pydantic ValidationError into "loc -> loc: msg" strings.

    Args:
        error: The validation error.

    Returns:
        One string per error entry.
    """
    issues: list[str] = []
    for entry in error.errors():
        loc = " -> ".join(str(part) for part in entry["loc"])
        issues.append(f"{loc}: {entry['msg']}" if loc else entry["msg"])
    return issues


def parse_model(model: type[M], data: Any) -> ParseResult[M]:
    """
    Validate data against a pydantic model without raising.

    Args:
        model: Pydantic model class.
        data: Raw data (usually loaded from YAML or JSON).

    Returns:
        ParseResult holding the model instance or the validation issues.
    """
    if data is None:
        return ParseResult.failure("document is empty")
    try:
        return ParseResult.success(model.model_validate(data))
    except ValidationError as e:
        return ParseResult(ok=False, issues=format_validation_error(e))
