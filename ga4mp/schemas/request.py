from __future__ import annotations

import math
import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def now_micros() -> int:
    return time.time_ns() // 1_000


def _check_finite(value: Any, path: str, seen: set[int] | None = None) -> None:
    # JSON has no NaN or Infinity; pydantic would quietly write null.
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"{path}: non-finite float {value!r}")
    if not isinstance(value, (dict, list, tuple)):
        return
    seen = set() if seen is None else seen
    if id(value) in seen:
        # Cycles are reported by the serializer.
        return
    seen.add(id(value))
    if isinstance(value, dict):
        for key, item in value.items():
            _check_finite(item, f"{path}.{key}", seen)
    else:
        for i, item in enumerate(value):
            _check_finite(item, f"{path}[{i}]", seen)


class Event(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    params: dict[str, Any] = Field(default_factory=dict)


class Request(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # A unique ID per user/instance combination.
    client_id: str
    # Cross-platform user ID; left off the wire when empty.
    user_id: str = ""
    timestamp_micros: int = Field(default_factory=now_micros)
    user_properties: dict[str, str] = Field(default_factory=dict)
    non_personalized_ads: bool = False
    events: list[Event] = Field(default_factory=list)

    def to_json(self) -> bytes:
        for i, event in enumerate(self.events):
            _check_finite(event.params, f"events[{i}].params")
        exclude = None if self.user_id else {"user_id"}
        return self.model_dump_json(exclude=exclude).encode("utf-8")
