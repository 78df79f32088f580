"""
Request body validation helpers.

Bodies are checked against a Pydantic model per endpoint. The result is a
tagged value: either the parsed model or the list of offending fields.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_INT_RE = re.compile(r"[+-]?\d+")


@dataclass
class BodyCheck(Generic[ModelT]):
    """Outcome of validating a request body."""
    value: Optional[ModelT] = None
    fields: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None


def check_body(model_cls: Type[ModelT], payload: Any) -> BodyCheck[ModelT]:
    """
    Validate ``payload`` against ``model_cls``.

    A payload that is not a JSON object counts as having every field missing.
    ``null`` values count as missing.
    """
    if not isinstance(payload, dict):
        payload = {}
    payload = {key: value for key, value in payload.items() if value is not None}

    try:
        return BodyCheck(value=model_cls.model_validate(payload))
    except ValidationError as e:
        fields: List[str] = []
        for error in e.errors():
            name = str(error["loc"][0]) if error["loc"] else "body"
            if name not in fields:
                fields.append(name)
        return BodyCheck(fields=fields)


def coerce_int(value: Any) -> Optional[int]:
    """
    Convert an integer-like value to ``int``.

    Accepts ints, integral floats and strings of digits. Booleans and
    anything else yield None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INT_RE.fullmatch(value.strip()):
        return int(value.strip())
    return None
