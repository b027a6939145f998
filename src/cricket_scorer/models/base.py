"""Base model classes for the scoring entities."""

import math
import uuid
from typing import Annotated, Any, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer


# Reserved token for an unlimited overs setting in serialized snapshots
UNLIMITED_OVERS_TOKEN = "Infinity"
_UNLIMITED_ALIASES = {"infinity", "inf", "unlimited", "∞"}


def new_id() -> str:
    """Generate a fresh opaque entity id."""
    return uuid.uuid4().hex


def ref_id(ref: Union[str, "EntityModel"]) -> str:
    """Accept either an entity or its id and return the id."""
    if isinstance(ref, str):
        return ref
    return ref.id


def parse_overs_limit(value: Any) -> Any:
    """Decode an overs limit, mapping the unlimited tokens back to ``math.inf``."""
    if value is None:
        return math.inf
    if isinstance(value, str) and value.strip().lower() in _UNLIMITED_ALIASES:
        return math.inf
    return value


def dump_overs_limit(value: float):
    """Encode an overs limit so that unlimited survives a text round trip."""
    if math.isinf(value):
        return UNLIMITED_OVERS_TOKEN
    if float(value).is_integer():
        return int(value)
    return value


OversLimit = Annotated[
    float,
    BeforeValidator(parse_overs_limit),
    Field(gt=0),
    PlainSerializer(dump_overs_limit, when_used="json"),
]


def format_overs_limit(value: float) -> str:
    """Human readable overs limit."""
    if math.isinf(value):
        return "Unlimited"
    return str(dump_overs_limit(value))


class EntityModel(BaseModel):
    """Base class for all identity-keyed scoring entities."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=new_id, min_length=1)
