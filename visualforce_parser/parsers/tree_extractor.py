"""
Tree traversal for Visualforce pages.

This module provides the TreeExtractor class, which walks a built markup tree
depth-first and records component usage, page blocks, action supports,
output panels, bindings and merge-field expressions.

Page blocks are tracked on an explicit stack: a component is attributed to
the innermost block open at the point it is found, and only to that block.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from visualforce_parser.config import DEFAULT_CONFIG, ParserConfig
from visualforce_parser.domain.constants import (
    ACTION_SUPPORT_TAGS,
    BLOCK_TAGS,
    COMMAND_NAMES,
    FORM_TAGS,
    INPUT_NAME_PREFIXES,
    OUTPUT_PANEL_TAGS,
)
from visualforce_parser.domain.enums import ExtractionMode
from visualforce_parser.domain.markup_tree import MarkupElement, MarkupNode, MarkupText
from visualforce_parser.domain.models import (
    ActionSupport,
    ComponentUsage,
    OutputPanel,
    PageBlock,
    ParsedResult,
)
from visualforce_parser.domain.text_utils import collapse_whitespace, truncate
from visualforce_parser.expressions.classifier import ExpressionCollector, first_expression

logger = logging.getLogger(__name__)


class BlockStack:
    """Stack of the page blocks enclosing the current traversal position."""

    def __init__(self):
        self._blocks: list[PageBlock] = []

    def __len__(self) -> int:
        return len(self._blocks)

    @property
    def current(self) -> PageBlock | None:
        return self._blocks[-1] if self._blocks else None

    @contextmanager
    def enter(self, block: PageBlock) -> Iterator[PageBlock]:
        """Make ``block`` the active block for the duration of the ``with`` body."""
        self._blocks.append(block)
        try:
            yield block
        finally:
            self._blocks.pop()


@dataclass
class _TraversalState:
    result: ParsedResult
    collector: ExpressionCollector = field(default_factory=ExpressionCollector)
    blocks: BlockStack = field(default_factory=BlockStack)


class TreeExtractor:
    """
    Extracts a ParsedResult from a page tree.

    Each call to ``extract`` works on its own state, so one extractor can be
    shared between threads.

    Args:
        config: Parser configuration (custom namespaces, preview lengths).
    """

    def __init__(self, config: ParserConfig = DEFAULT_CONFIG):
        self.config = config

    def extract(self, root: MarkupElement) -> ParsedResult:
        """
        Walk the tree under ``root`` (the page element).

        Args:
            root: Root element returned by the tree builder

        Returns:
            ParsedResult with tree-derived fields populated. Set fields are
            not yet deduplicated; the engine normalizes them afterwards.
        """
        state = _TraversalState(result=ParsedResult(extraction_mode=ExtractionMode.TREE))
        result = state.result

        self._read_page_attributes(root, result)
        # The page element's own attributes are scanned, but it is not a component
        self._process_attributes(root, state)
        self._visit_children(root, [root.tag], state)

        result.apex_expressions = state.collector.apex_expressions
        result.field_references = state.collector.field_references

        logger.debug(
            "Tree traversal found %d components, %d blocks, %d expressions",
            len(result.components), len(result.page_blocks), len(result.apex_expressions),
        )
        return result

    @staticmethod
    def _read_page_attributes(root: MarkupElement, result: ParsedResult) -> None:
        result.controller_name = root.get('standardController') or None
        result.custom_controller_name = root.get('controller') or None
        extensions = root.get('extensions')
        if extensions:
            result.extension_names = [e.strip() for e in extensions.split(',') if e.strip()]
        result.api_version = root.get('apiVersion') or None
        result.page_label = root.get('label') or None

    # ── Traversal ────────────────────────────────────────────────────────

    def _visit_children(self, element: MarkupElement, path: list[str], state: _TraversalState) -> None:
        for child in element.children:
            self._visit(child, path, state)

    def _visit(self, node: MarkupNode, path: list[str], state: _TraversalState) -> None:
        if isinstance(node, MarkupText):
            state.collector.scan(node.text, '.'.join(path))
            return

        result = state.result
        attributes = self._process_attributes(node, state)

        if node.is_namespaced:
            usage = ComponentUsage(namespace=node.namespace, name=node.name, attributes=attributes)
            result.components.append(usage)
            if node.namespace in self.config.custom_namespaces:
                result.custom_components.append(node.name)
            if state.blocks.current is not None:
                state.blocks.current.components.append(usage)

        if node.tag in FORM_TAGS:
            result.form_count += 1

        if node.tag in ACTION_SUPPORT_TAGS:
            result.action_supports.append(ActionSupport(
                event=node.get('event'),
                re_render=node.get('reRender'),
                action=node.get('action'),
                status=node.get('status'),
            ))

        if node.tag in OUTPUT_PANEL_TAGS:
            result.output_panels.append(self._build_output_panel(node))

        child_path = path + [node.tag]
        if node.tag in BLOCK_TAGS:
            block = PageBlock(title=node.get('title'), id=node.get('id'))
            result.page_blocks.append(block)
            with state.blocks.enter(block):
                self._visit_children(node, child_path, state)
        else:
            self._visit_children(node, child_path, state)

    # ── Attributes ───────────────────────────────────────────────────────

    def _process_attributes(self, element: MarkupElement, state: _TraversalState) -> dict[str, str]:
        """
        Scan every attribute value for expressions and collect bindings.

        Args:
            element: Element whose attributes are processed
            state: Traversal state receiving expressions and bindings

        Returns:
            Raw attribute name → value mapping
        """
        result = state.result
        for attr in element.attributes:
            state.collector.scan(attr.value, f"{element.tag}.{attr.name}")

            if not element.is_namespaced:
                continue
            if attr.name == 'value' and element.name.startswith(INPUT_NAME_PREFIXES):
                binding = first_expression(attr.value)
                if binding:
                    result.input_bindings.append(binding)
            elif attr.name == 'action' and element.name in COMMAND_NAMES:
                action = first_expression(attr.value)
                if action:
                    result.button_actions.append(action)

        return element.attribute_map()

    def _build_output_panel(self, element: MarkupElement) -> OutputPanel:
        text = next((t.text for t in element.text_children() if t.text.strip()), None)
        if text:
            preview = truncate(collapse_whitespace(text), self.config.preview_length)
        else:
            tags = [child.tag for child in element.element_children()]
            preview = truncate(', '.join(tags), self.config.summary_length) if tags else None

        return OutputPanel(
            id=element.get('id'),
            layout=element.get('layout'),
            content_preview=preview,
        )
