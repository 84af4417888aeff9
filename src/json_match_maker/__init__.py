"""json_match_maker: declarative field-by-field matching of objects against JSON.

All public types are exported from this module for flat imports:

    from json_match_maker import JsonMatcher, DEFAULT, Each
"""

import logging

__version__ = "0.1.0"

# Config loading, see json_match_maker._config for details
from json_match_maker._config import (
    AccessorPath,
    ConfigParseError,
    EachPath,
    MatchConfig,
    load_match_config,
    parse_match_config,
)

# Rules
from json_match_maker._definition import (
    DEFAULT,
    Compute,
    ConfigurationError,
    Default,
    DefinitionError,
    Each,
    MatchDefinition,
    Rule,
    expand_definition,
)

# Matcher
from json_match_maker._matcher import JsonMatcher, MatchDefinitionNotFound
from json_match_maker._path import extract_path
from json_match_maker._report import MismatchReport, format_mismatch
from json_match_maker._types import Extractor, JsonValue
from json_match_maker._values import (
    ExpectedValue,
    InvalidComparisonError,
    TargetValue,
    resolve_accessor_path,
    values_equal,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Protocols
    "Extractor",
    "JsonValue",
    # Rules
    "Default",
    "DEFAULT",
    "Compute",
    "Each",
    "Rule",
    "MatchDefinition",
    "expand_definition",
    # Matcher
    "JsonMatcher",
    "MismatchReport",
    "format_mismatch",
    # Resolution
    "ExpectedValue",
    "TargetValue",
    "extract_path",
    "resolve_accessor_path",
    "values_equal",
    # Config
    "AccessorPath",
    "EachPath",
    "MatchConfig",
    "parse_match_config",
    "load_match_config",
    # Errors
    "ConfigurationError",
    "DefinitionError",
    "MatchDefinitionNotFound",
    "ConfigParseError",
    "InvalidComparisonError",
]
