"""Bit-level primitives for response buffers."""

from signalset.core.bitfield import bytes_needed, extract_bits, insert_bits, raw_domain

__all__ = ["extract_bits", "insert_bits", "raw_domain", "bytes_needed"]
