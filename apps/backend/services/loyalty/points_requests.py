"""
Points request bodies.

Turns raw JSON bodies for /add and /spend into typed models. Checks run in a
fixed order and the first failure wins:

1. body shape   - number of top-level keys (3 for add, 1 for spend)
2. missing      - a required key is absent
3. type         - a present key has the wrong JSON type
4. value        - enforced by the ledger (spend points must be > 0)

The shape check counts raw keys only, so three keys with one misspelled name
is a "missing" failure, not a shape failure.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from apps.backend.services.errors import (
    ADD_BAD_TYPES,
    ADD_MISSING,
    SPEND_BAD_TYPE,
    SPEND_MISSING,
    InvalidBodyShape,
    InvalidFieldType,
    MissingField,
)

ADD_FIELDS = ("payer", "points", "timestamp")
SPEND_FIELDS = ("points",)


def parse_timestamp(value: Any) -> datetime:
    """
    ISO-8601 string -> datetime. Accepts a trailing Z.
    """
    if not isinstance(value, str):
        raise ValueError("timestamp must be a string")
    ts = value.strip()
    if ts.endswith("Z"):
        ts = ts[:-1] + "+00:00"
    return datetime.fromisoformat(ts)


def whole_number(value: Any) -> Any:
    # JSON 5000.0 is the same amount as 5000; 50.5 stays a float and fails
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class AddPointsIn(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    payer: str = Field(..., min_length=1)
    points: int
    timestamp: datetime

    @field_validator("points", mode="before")
    @classmethod
    def _points(cls, v: Any) -> Any:
        return whole_number(v)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _timestamp(cls, v: Any) -> datetime:
        if isinstance(v, datetime):
            return v
        return parse_timestamp(v)


class SpendPointsIn(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    points: int

    @field_validator("points", mode="before")
    @classmethod
    def _points(cls, v: Any) -> Any:
        return whole_number(v)


def load_body(raw: Union[bytes, str, None]) -> Dict[str, Any]:
    """
    Raw request bytes -> dict. Anything that is not a JSON object counts as an
    empty body.
    """
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _check_shape(body: Any, fields: tuple, missing_message: str) -> Dict[str, Any]:
    if not isinstance(body, dict) or len(body) != len(fields):
        raise InvalidBodyShape()
    if any(name not in body for name in fields):
        raise MissingField(missing_message)
    return body


def parse_add_body(body: Any) -> AddPointsIn:
    body = _check_shape(body, ADD_FIELDS, ADD_MISSING)
    try:
        return AddPointsIn.model_validate(body)
    except ValidationError:
        raise InvalidFieldType(ADD_BAD_TYPES)


def parse_spend_body(body: Any) -> SpendPointsIn:
    body = _check_shape(body, SPEND_FIELDS, SPEND_MISSING)
    try:
        return SpendPointsIn.model_validate(body)
    except ValidationError:
        raise InvalidFieldType(SPEND_BAD_TYPE)
