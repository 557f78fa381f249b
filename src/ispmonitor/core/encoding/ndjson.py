"""NDJSON encoder for statistics."""

import json
from collections.abc import Iterable
from typing import Any

from ispmonitor.core.models import Event, Metric, Statistic
from ispmonitor.core.values import ValueKind


def statistic_to_dict(statistic: Statistic) -> dict[str, Any]:
    """Convert a statistic to a JSON-serializable dict.

    Metric values keep their native representation; durations are written
    as integer nanoseconds with ``"unit": "ns"``.
    """
    if isinstance(statistic, Event):
        return {
            "type": "event",
            "title": statistic.title,
            "message": statistic.message,
            "tags": list(statistic.tags),
        }
    if isinstance(statistic, Metric):
        obj: dict[str, Any] = {
            "type": statistic.kind.value,
            "name": statistic.name,
            "value": statistic.value.raw,
            "value_kind": statistic.value.kind.value,
            "tags": list(statistic.tags),
        }
        if statistic.value.kind is ValueKind.DURATION:
            obj["unit"] = "ns"
        return obj
    raise TypeError(f"expected a Metric or Event, got {type(statistic).__name__}")


def encode_statistics(statistics: Iterable[Statistic]) -> str:
    """Encode statistics to newline-delimited JSON.

    Args:
        statistics: An iterable of Metric or Event objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no statistics.
    """
    lines = [json.dumps(statistic_to_dict(statistic)) for statistic in statistics]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
