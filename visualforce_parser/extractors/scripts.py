"""Raw-text passes that run after either extraction strategy.

Scripts, static resources, form counts, remoting and template fragments are
always read from the raw markup, never from the tree, so they stay correct
when only the regex fallback ran.
"""

import logging

from visualforce_parser.config import DEFAULT_CONFIG, ParserConfig
from visualforce_parser.domain.constants import (
    EXTERNAL_URL_RE,
    FORM_OPEN_RE,
    INCLUDE_DIRECTIVE_RE,
    REMOTING_MARKERS,
    RESOURCE_REF_RE,
    SCRIPT_ELEMENT_RE,
    SCRIPT_SRC_RE,
    STATIC_RESOURCE_MARKERS,
    TEMPLATE_FRAGMENT_PATTERNS,
)
from visualforce_parser.domain.enums import ExtractionMode, ScriptType
from visualforce_parser.domain.models import ParsedResult, ScriptReference, dedupe
from visualforce_parser.domain.text_utils import truncate

logger = logging.getLogger(__name__)


def extract_scripts(text: str, config: ParserConfig = DEFAULT_CONFIG) -> list[ScriptReference]:
    """
    Collect script elements, include directives and resource references.

    Args:
        text: Raw page markup
        config: Supplies the inline snippet length

    Returns:
        Unique ScriptReference entries in the order first found
    """
    refs: list[ScriptReference] = []

    for m in SCRIPT_ELEMENT_RE.finditer(text):
        src = SCRIPT_SRC_RE.search(m.group(1) or '')
        body = (m.group(2) or '').strip()
        if src:
            refs.append(ScriptReference(ScriptType.EXTERNAL_URL, src.group(1).strip()))
        elif body:
            refs.append(ScriptReference(
                ScriptType.INLINE_SCRIPT, truncate(body, config.inline_script_length),
            ))

    for m in INCLUDE_DIRECTIVE_RE.finditer(text):
        value = m.group(1) if m.group(1) is not None else m.group(2)
        resources = RESOURCE_REF_RE.findall(value)
        if resources:
            refs.extend(ScriptReference(ScriptType.STATIC_RESOURCE, name) for name in resources)
            continue
        url = EXTERNAL_URL_RE.match(value)
        if url:
            refs.append(ScriptReference(ScriptType.EXTERNAL_URL, url.group(1)))

    refs.extend(ScriptReference(ScriptType.STATIC_RESOURCE, name) for name in RESOURCE_REF_RE.findall(text))

    return dedupe(refs)


def count_forms(text: str) -> int:
    return len(FORM_OPEN_RE.findall(text))


def has_remote_objects(text: str) -> bool:
    return any(marker in text for marker in REMOTING_MARKERS)


def has_static_resources(text: str) -> bool:
    return any(marker in text for marker in STATIC_RESOURCE_MARKERS)


def extract_template_fragments(text: str) -> list[str]:
    """Labelled composition/insert/define names, e.g. ``Template: SiteLayout``."""
    fragments = []
    for pattern, label in TEMPLATE_FRAGMENT_PATTERNS:
        fragments.extend(f"{label}: {m.group(1)}" for m in pattern.finditer(text))
    return dedupe(fragments)


def apply_raw_text_passes(result: ParsedResult, text: str, config: ParserConfig = DEFAULT_CONFIG) -> None:
    """Fill every raw-text derived field of ``result`` in place."""
    tree_forms = result.form_count
    result.form_count = count_forms(text)
    if result.extraction_mode is ExtractionMode.TREE and tree_forms != result.form_count:
        logger.debug("Form count differs: %d in tree, %d in raw text", tree_forms, result.form_count)

    result.has_remote_objects = has_remote_objects(text)
    result.has_static_resources = has_static_resources(text)
    result.scripts = extract_scripts(text, config)
    result.template_fragments = dedupe(result.template_fragments + extract_template_fragments(text))
