"""Captured response files."""

from signalset.capture.capture import CapturedResponse, ResponseReplayer, parse_hex
from signalset.capture.jsonl import JsonlWriter

__all__ = ["CapturedResponse", "ResponseReplayer", "JsonlWriter", "parse_hex"]
