"""Shared utilities for the decision engine."""
from utils.coerce import coerce_non_negative_int, to_text
from utils.dates import EPOCH, parse_timestamp, to_date_string, to_iso_string

__all__ = [
    "coerce_non_negative_int",
    "to_text",
    "EPOCH",
    "parse_timestamp",
    "to_date_string",
    "to_iso_string",
]
