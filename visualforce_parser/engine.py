"""
Page parsing entry point.

``parse`` picks an extraction strategy, runs it, and then applies the passes
every strategy shares:

  - tree       → well-formed markup with an ``apex:page`` / ``apex:component`` root
  - fallback   → tree construction failed; regex extraction over the raw text
  - lightweight → markup above the size threshold; reduced regex extraction

After extraction the raw-text passes (scripts, resources, form count,
template fragments) run, expression sets are normalized and entity
dependencies are resolved. ``parse`` never raises for any input.
"""

import logging
import xml.etree.ElementTree as ET
from functools import lru_cache

from visualforce_parser.config import DEFAULT_CONFIG, ParserConfig
from visualforce_parser.dependencies.resolver import DependencyResolver
from visualforce_parser.domain.enums import ExtractionMode
from visualforce_parser.domain.models import ParsedResult, dedupe
from visualforce_parser.expressions.classifier import rank_expressions
from visualforce_parser.extractors.scripts import apply_raw_text_passes
from visualforce_parser.parsers.fallback_extractor import extract_fallback, extract_lightweight
from visualforce_parser.parsers.page_meta_parser import parse_page_metadata
from visualforce_parser.parsers.tree_builder import TreeBuilder, TreeBuildError
from visualforce_parser.parsers.tree_extractor import TreeExtractor

logger = logging.getLogger(__name__)

_SET_FIELDS = (
    'template_fragments',
    'input_bindings',
    'button_actions',
    'custom_components',
    'sobject_references',
    'detailed_field_references',
)


@lru_cache(maxsize=8)
def _tree_builder(config: ParserConfig) -> TreeBuilder:
    return TreeBuilder(config)


def select_strategy(text: str, config: ParserConfig = DEFAULT_CONFIG) -> ExtractionMode:
    """Initial strategy for ``text``; TREE may still degrade to FALLBACK."""
    if config.is_oversize(text):
        return ExtractionMode.LIGHTWEIGHT
    return ExtractionMode.TREE


def extract_tree(text: str, config: ParserConfig = DEFAULT_CONFIG) -> ParsedResult:
    """
    Build the page tree and traverse it.

    Raises:
        TreeBuildError: If the markup is malformed or has no page root
    """
    root = _tree_builder(config).build(text)
    return TreeExtractor(config).extract(root)


def parse(raw_markup, config: ParserConfig = DEFAULT_CONFIG, meta_xml: str | None = None) -> ParsedResult:
    """
    Extract the semantic model of a Visualforce page.

    Args:
        raw_markup: Page markup. ``None`` is treated as empty; bytes are
            decoded as UTF-8 with replacement.
        config: Parser configuration.
        meta_xml: Optional ``.page-meta.xml`` content used to fill the API
            version and label when the page does not declare them.

    Returns:
        ParsedResult. Never raises: failures degrade to a less detailed
        strategy and are reported in ``warnings``.
    """
    text = _coerce(raw_markup)
    strategy = select_strategy(text, config)
    logger.debug("Parsing %d characters, strategy %s", len(text), strategy.value)

    if strategy is ExtractionMode.LIGHTWEIGHT:
        logger.info(
            "Markup is %d characters (threshold %d), using lightweight extraction",
            len(text), config.size_threshold,
        )
        result = extract_lightweight(text, config)
    else:
        try:
            result = extract_tree(text, config)
        except TreeBuildError as e:
            logger.info("Tree extraction unavailable, falling back to regex: %s", e)
            result = extract_fallback(text, config)
            result.warnings.insert(0, f"Tree extraction failed: {e}")
        except Exception as e:
            logger.warning("Tree traversal failed, falling back to regex: %s", e, exc_info=True)
            result = extract_fallback(text, config)
            result.warnings.insert(0, f"Tree traversal failed: {e}")

    _finish(result, text, config)

    if meta_xml:
        _apply_metadata(result, meta_xml)

    return result


def _coerce(raw_markup) -> str:
    if raw_markup is None:
        return ''
    if isinstance(raw_markup, (bytes, bytearray)):
        return bytes(raw_markup).decode('utf-8', errors='replace')
    return str(raw_markup)


def _finish(result: ParsedResult, text: str, config: ParserConfig) -> None:
    """Passes shared by every strategy."""
    try:
        apply_raw_text_passes(result, text, config)
    except Exception as e:
        logger.warning("Raw text passes failed: %s", e, exc_info=True)
        result.warnings.append(f"Raw text passes failed: {e}")

    result.apex_expressions = rank_expressions(result.apex_expressions)
    for name in _SET_FIELDS:
        setattr(result, name, dedupe(getattr(result, name)))

    try:
        DependencyResolver().apply(result)
    except Exception as e:
        logger.warning("Dependency resolution failed: %s", e, exc_info=True)
        result.warnings.append(f"Dependency resolution failed: {e}")

    logger.debug(
        "Finished %s extraction: %d components, %d expressions, %d scripts, %d entities",
        result.extraction_mode.value, len(result.components), len(result.apex_expressions),
        len(result.scripts), len(result.sobject_references),
    )


def _apply_metadata(result: ParsedResult, meta_xml: str) -> None:
    try:
        meta = parse_page_metadata(meta_xml)
    except (ET.ParseError, ValueError) as e:
        logger.warning("Ignoring unreadable page metadata: %s", e)
        result.warnings.append(f"Page metadata ignored: {e}")
        return
    if not result.api_version:
        result.api_version = meta.api_version
    if not result.page_label:
        result.page_label = meta.label
