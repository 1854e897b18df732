from .config import Settings, load_settings
from .extractors import FieldSchema
from .llm import OllamaClient, OllamaError
from .normalizer import normalize_llm_output, normalize_with_trace

__all__ = [
    "Settings",
    "load_settings",
    "FieldSchema",
    "OllamaClient",
    "OllamaError",
    "normalize_llm_output",
    "normalize_with_trace",
]
