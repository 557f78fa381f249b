"""Encoders for statistics."""

from ispmonitor.core.encoding.ndjson import encode_statistics, statistic_to_dict

__all__ = ["encode_statistics", "statistic_to_dict"]
