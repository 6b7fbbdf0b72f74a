"""Domain enums for the visualforce parser."""
from enum import Enum


class ScriptType(str, Enum):
    """Kinds of script references found in a page."""
    STATIC_RESOURCE = "StaticResource"
    INLINE_SCRIPT = "InlineScript"
    EXTERNAL_URL = "ExternalUrl"


class ExpressionKind(str, Enum):
    """Structural classes of merge-field expressions."""
    FUNCTION_CALL = "function_call"
    BOOLEAN = "boolean_expression"
    PROPERTY_PATH = "property_path"
    SIMPLE_REFERENCE = "simple_reference"


class ExtractionMode(str, Enum):
    """Which extraction strategy produced a result."""
    TREE = "tree"
    FALLBACK = "fallback"
    LIGHTWEIGHT = "lightweight"
