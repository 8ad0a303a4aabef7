"""Model catalog: which models a droid can be assigned."""

from .help_parser import HelpModels, parse_help_text
from .loader import CatalogLoader, load_custom_models, run_help_command
from .models import FALLBACK_MODELS, INHERIT, ModelCatalog, ReasoningInfo

__all__ = [
    "CatalogLoader",
    "FALLBACK_MODELS",
    "HelpModels",
    "INHERIT",
    "ModelCatalog",
    "ReasoningInfo",
    "load_custom_models",
    "parse_help_text",
    "run_help_command",
]
