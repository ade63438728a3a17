"""
Base for the typed request bodies accepted by the workflow endpoints.

Each operation declares one pydantic model. Cross-references are bare integer
ids; unknown keys are rejected rather than guessed at.
"""

from typing import Annotated, Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from .errors import InvalidInput

# Ids arrive as JSON integers only: no strings, no nested objects, no booleans.
RecordId = Annotated[StrictInt, Field(gt=0)]


class RequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, frozen=True)

    @classmethod
    def from_payload(cls, payload: Any):
        if not isinstance(payload, dict):
            raise InvalidInput("Request body must be a JSON object")
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise InvalidInput(describe_validation_error(e)) from e


def describe_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "body"
        parts.append(f"{field}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def canonical_choice(value: Optional[str], choices: Iterable[str]) -> Optional[str]:
    """Match ``value`` case-insensitively against ``choices`` and return the stored spelling."""
    if value is None:
        return None
    choices = list(choices)
    for choice in choices:
        if choice.lower() == value.strip().lower():
            return choice
    raise ValueError(f"must be one of {', '.join(choices)}")
