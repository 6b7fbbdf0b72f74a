"""
Regex extraction for pages that cannot be built into a tree.

Two entry points share the same step functions:

  - ``extract_fallback``    → malformed markup or missing page root; rebuilds
                              as much of the model as pattern matching allows
  - ``extract_lightweight`` → oversized markup; controller, extensions,
                              components and expressions only

Neither builds any nesting: page blocks carry no components and component
attributes are left empty. Each step runs on its own, so a failing step
leaves its fields empty and the remaining steps still run.
"""

import logging
import re
from functools import lru_cache
from typing import Callable

from visualforce_parser.config import DEFAULT_CONFIG, ParserConfig
from visualforce_parser.domain.constants import (
    ACTION_SUPPORT_TAG_RE,
    ATTRIBUTE_RE,
    BUTTON_ACTION_RE,
    COMPONENT_NAME_RE,
    CUSTOM_CONTROLLER_RE,
    EXTENSIONS_RE,
    FALLBACK_CONTEXT,
    INPUT_BINDING_RE,
    OUTPUT_PANEL_CLOSE_RE,
    OUTPUT_PANEL_OPEN_RE,
    PAGE_BLOCK_TAG_RE,
    PAGE_OPEN_TAG_RE,
    STANDARD_CONTROLLER_RE,
)
from visualforce_parser.domain.enums import ExtractionMode
from visualforce_parser.domain.models import (
    ActionSupport,
    ComponentUsage,
    OutputPanel,
    PageBlock,
    ParsedResult,
)
from visualforce_parser.domain.text_utils import collapse_whitespace, truncate
from visualforce_parser.expressions.classifier import ExpressionCollector

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r'<!--[\s\S]*?-->')

Step = Callable[[str, ParsedResult, ParserConfig], None]


def extract_fallback(text: str, config: ParserConfig = DEFAULT_CONFIG) -> ParsedResult:
    """Rebuild an approximate model from raw text. Never raises."""
    result = ParsedResult(extraction_mode=ExtractionMode.FALLBACK)
    _run_steps(text, result, config, FALLBACK_STEPS)
    return result


def extract_lightweight(text: str, config: ParserConfig = DEFAULT_CONFIG) -> ParsedResult:
    """Reduced extraction for oversized input. Never raises."""
    result = ParsedResult(extraction_mode=ExtractionMode.LIGHTWEIGHT)
    _run_steps(text, result, config, LIGHTWEIGHT_STEPS)
    return result


def _run_steps(text: str, result: ParsedResult, config: ParserConfig, steps: list[Step]) -> None:
    for step in steps:
        try:
            step(text, result, config)
        except Exception as e:
            logger.warning("Regex extraction step %s failed: %s", step.__name__, e)
            result.warnings.append(f"{step.__name__} failed: {e}")


def parse_attributes(attribute_text: str) -> dict[str, str]:
    """Parse ``name="value"`` pairs from the inside of an opening tag."""
    attributes = {}
    for m in ATTRIBUTE_RE.finditer(attribute_text or ''):
        attributes[m.group(1)] = m.group(2) if m.group(2) is not None else m.group(3)
    return attributes


def _first_group(pattern: re.Pattern, text: str) -> str | None:
    m = pattern.search(text)
    return m.group(1) if m else None


@lru_cache(maxsize=8)
def _opaque_body_pattern(opaque_tags: tuple[str, ...]) -> re.Pattern | None:
    if not opaque_tags:
        return None
    names = '|'.join(re.escape(tag) for tag in opaque_tags)
    return re.compile(
        rf'(<(?:{names})\b(?:[^>"\']|"[^"]*"|\'[^\']*\')*?(?<!/)>)[\s\S]*?(</(?:{names})\s*>)',
        re.I,
    )


def visible_markup(text: str, config: ParserConfig = DEFAULT_CONFIG) -> str:
    """Markup with comments and opaque bodies (script, style) removed."""
    text = _COMMENT_RE.sub('', text)
    pattern = _opaque_body_pattern(config.opaque_tags)
    return pattern.sub(r'\1\2', text) if pattern else text


# ── Steps ────────────────────────────────────────────────────────────────

def _extract_page_attributes(text: str, result: ParsedResult, config: ParserConfig) -> None:
    text = visible_markup(text, config)
    page_tag = PAGE_OPEN_TAG_RE.search(text)
    attributes = parse_attributes(page_tag.group(1)) if page_tag else {}

    # An unterminated page tag still leaves the attribute text behind
    result.controller_name = (
        attributes.get('standardController') or _first_group(STANDARD_CONTROLLER_RE, text) or None
    )
    result.custom_controller_name = (
        attributes.get('controller') or _first_group(CUSTOM_CONTROLLER_RE, text) or None
    )
    extensions = attributes.get('extensions') or _first_group(EXTENSIONS_RE, text)
    if extensions:
        result.extension_names = [e.strip() for e in extensions.split(',') if e.strip()]
    result.api_version = attributes.get('apiVersion') or None
    result.page_label = attributes.get('label') or None


def _extract_components(text: str, result: ParsedResult, config: ParserConfig) -> None:
    for m in COMPONENT_NAME_RE.finditer(visible_markup(text, config)):
        namespace, name = m.group(1), m.group(2)
        if f"{namespace}:{name}" in config.root_tags:
            continue
        result.components.append(ComponentUsage(namespace=namespace, name=name))
        if namespace in config.custom_namespaces:
            result.custom_components.append(name)


def _extract_bindings(text: str, result: ParsedResult, config: ParserConfig) -> None:
    text = visible_markup(text, config)
    result.input_bindings.extend(m.group(1).strip() for m in INPUT_BINDING_RE.finditer(text))
    result.button_actions.extend(m.group(1).strip() for m in BUTTON_ACTION_RE.finditer(text))


def _extract_page_blocks(text: str, result: ParsedResult, config: ParserConfig) -> None:
    text = visible_markup(text, config)
    for m in PAGE_BLOCK_TAG_RE.finditer(text):
        attributes = parse_attributes(m.group(1))
        result.page_blocks.append(PageBlock(title=attributes.get('title'), id=attributes.get('id')))


def _extract_action_supports(text: str, result: ParsedResult, config: ParserConfig) -> None:
    text = visible_markup(text, config)
    for m in ACTION_SUPPORT_TAG_RE.finditer(text):
        attributes = parse_attributes(m.group(1))
        result.action_supports.append(ActionSupport(
            event=attributes.get('event'),
            re_render=attributes.get('reRender'),
            action=attributes.get('action'),
            status=attributes.get('status'),
        ))


def _extract_output_panels(text: str, result: ParsedResult, config: ParserConfig) -> None:
    text = visible_markup(text, config)
    for m in OUTPUT_PANEL_OPEN_RE.finditer(text):
        attributes = parse_attributes(m.group(1))
        preview = None
        if not m.group(2):
            close = OUTPUT_PANEL_CLOSE_RE.search(text, m.end())
            body = collapse_whitespace(text[m.end():close.start()]) if close else ''
            preview = truncate(body, config.preview_length) if body else None
        result.output_panels.append(OutputPanel(
            id=attributes.get('id'),
            layout=attributes.get('layout'),
            content_preview=preview,
        ))


def _extract_expressions(text: str, result: ParsedResult, config: ParserConfig) -> None:
    collector = ExpressionCollector()
    collector.scan(text, FALLBACK_CONTEXT)
    result.apex_expressions.extend(collector.apex_expressions)
    result.field_references.extend(collector.field_references)


FALLBACK_STEPS: list[Step] = [
    _extract_page_attributes,
    _extract_components,
    _extract_bindings,
    _extract_page_blocks,
    _extract_action_supports,
    _extract_output_panels,
    _extract_expressions,
]

LIGHTWEIGHT_STEPS: list[Step] = [
    _extract_page_attributes,
    _extract_components,
    _extract_expressions,
]
