"""Request building, response validation and the generation client."""
from .schemas import ResponseKind, RESPONSE_MODELS
from .request_builder import SynthesisRequest, SynthesisRequestBuilder
from .response_parser import ResponseParser, extract_json_text
from .generation import GenerationClient

__all__ = [
    "ResponseKind",
    "RESPONSE_MODELS",
    "SynthesisRequest",
    "SynthesisRequestBuilder",
    "ResponseParser",
    "extract_json_text",
    "GenerationClient",
]
