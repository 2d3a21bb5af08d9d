"""Response decoding against a loaded signal set."""

from signalset.decoder.decoder import DecodedResponse, DecodedSignal, ResponseDecoder

__all__ = ["DecodedResponse", "DecodedSignal", "ResponseDecoder"]
