"""pobox-check: tell P.O.-box addresses from deliverable street addresses."""

from .classifier import Classifier, ClassifierConfig
from .config import create_classifier, load_config, load_from_yaml
from .pattern_set import PatternSet
from .patterns import DEFAULT_BLACKLIST, DEFAULT_WHITELIST, compile_patterns, find_spans
from .types import AddressTooLong, ConfigError, PatternError, Span, Verdict

__all__ = [
    "Classifier", "ClassifierConfig",
    "PatternSet",
    "DEFAULT_BLACKLIST", "DEFAULT_WHITELIST", "compile_patterns", "find_spans",
    "create_classifier", "load_config", "load_from_yaml",
    "AddressTooLong", "ConfigError", "PatternError", "Span", "Verdict",
]
__version__ = "0.1.0"
