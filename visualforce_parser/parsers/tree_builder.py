"""
Structural tree builder for Visualforce markup.

This module provides the TreeBuilder class, which turns raw page markup into
a typed ``MarkupElement`` tree using ``xml.etree.ElementTree``.

Page markup is rarely strict XML, so the text is normalized first:

  - bodies of opaque tags (script, style) are wrapped in CDATA so embedded
    code is captured verbatim instead of being parsed as markup
  - attributes without a value become ``name="true"``, unquoted values are
    quoted and ``<`` inside values is escaped
  - HTML named entities become numeric references and stray ``&`` is escaped
  - undeclared namespace prefixes (``apex:``, ``c:``) are declared on the root

Anything the XML facility still rejects is reported as MalformedMarkupError;
a well-formed document whose root is not a recognized page element is
reported as MissingRootError. Callers fall back to regex extraction for both.
"""

import logging
import re
import xml.etree.ElementTree as ET
from html.entities import name2codepoint

from visualforce_parser.config import DEFAULT_CONFIG, ParserConfig
from visualforce_parser.domain.markup_tree import MarkupAttribute, MarkupElement, MarkupNode, MarkupText

logger = logging.getLogger(__name__)


class TreeBuildError(Exception):
    """Markup could not be turned into a page tree."""
    pass


class MalformedMarkupError(TreeBuildError):
    """Markup is not well-formed enough for the XML facility."""
    pass


class MissingRootError(TreeBuildError):
    """Markup parsed, but its root is not a recognized page element."""
    pass


_CDATA_SPLIT_RE = re.compile(r'(<!\[CDATA\[[\s\S]*?\]\]>)')
_START_TAG_RE = re.compile(
    r'<([A-Za-z_][\w:.-]*)'
    r'((?:\s+[^\s=/>"\']+(?:\s*=\s*(?:"[^"]*"|\'[^\']*\'|[^\s"\'=<>`]+))?)*)'
    r'\s*(/?)>'
)
_ATTR_TOKEN_RE = re.compile(r'([^\s=/>"\']+)(?:\s*=\s*("[^"]*"|\'[^\']*\'|[^\s"\'=<>`]+))?')
_ENTITY_RE = re.compile(r'&([A-Za-z][A-Za-z0-9]*);')
_BARE_AMP_RE = re.compile(r'&(?!(?:#\d+|#x[0-9A-Fa-f]+|[A-Za-z][A-Za-z0-9]*);)')
_TAG_PREFIX_RE = re.compile(r'</?([A-Za-z_][\w.-]*):[A-Za-z_]')
_ATTR_PREFIX_RE = re.compile(r'\s([A-Za-z_][\w.-]*):[\w.-]+\s*=')
_XMLNS_RE = re.compile(r'\bxmlns(?::([\w.-]+))?\s*=\s*["\']([^"\']*)["\']')
# Comments, processing instructions and doctypes may precede the root element
_PROLOG_OR_TAG_RE = re.compile(r'<!--[\s\S]*?-->|<\?[\s\S]*?\?>|<![^>]*>|(<[A-Za-z_][\w:.-]*)')

_XML_ENTITIES = {'amp', 'lt', 'gt', 'quot', 'apos'}
_RESERVED_PREFIXES = {'xml', 'xmlns'}


class TreeBuilder:
    """
    Builds a typed markup tree from raw page text.

    The builder only reads its configuration, so one instance can be shared
    by concurrent parse calls.

    Args:
        config: Parser configuration (opaque tags, root tags, value trimming,
            boolean attribute tolerance).
    """

    def __init__(self, config: ParserConfig = DEFAULT_CONFIG):
        self.config = config
        self._opaque_patterns = [
            re.compile(
                rf'(<{re.escape(tag)}\b(?:[^>"\']|"[^"]*"|\'[^\']*\')*?(?<!/)>)([\s\S]*?)(</{re.escape(tag)}\s*>)',
                re.I,
            )
            for tag in config.opaque_tags
        ]

    def build(self, text: str) -> MarkupElement:
        """
        Parse markup text into a tree rooted at the page element.

        Args:
            text: Raw page markup

        Returns:
            Root MarkupElement

        Raises:
            MalformedMarkupError: If the text is not well-formed
            MissingRootError: If the root element is not a recognized page tag
        """
        prepared = self.prepare(text)
        try:
            root = ET.fromstring(prepared)
        except (ET.ParseError, ValueError) as e:
            raise MalformedMarkupError(f"Markup is not well-formed: {e}") from e

        uri_map = self._namespace_map(prepared)
        try:
            tree = self._convert(root, uri_map)
        except RecursionError as e:
            raise MalformedMarkupError("Markup nesting is too deep to build a tree") from e

        if tree.tag not in self.config.root_tags:
            raise MissingRootError(
                f"Root element <{tree.tag}> is not one of: {', '.join(self.config.root_tags)}"
            )
        return tree

    # ── Normalization ────────────────────────────────────────────────────

    def prepare(self, text: str) -> str:
        """Normalize raw markup into text the XML facility accepts."""
        text = text.lstrip('\ufeff').strip()
        for pattern in self._opaque_patterns:
            text = pattern.sub(self._wrap_opaque_body, text)
        text = self._outside_cdata(text, self._normalize_segment)
        return self._declare_prefixes(text)

    @staticmethod
    def _wrap_opaque_body(match: re.Match) -> str:
        opening, body, closing = match.groups()
        if not body.strip():
            return match.group(0)
        escaped = body.replace(']]>', ']]]]><![CDATA[>')
        return f"{opening}<![CDATA[{escaped}]]>{closing}"

    @staticmethod
    def _outside_cdata(text: str, transform) -> str:
        parts = _CDATA_SPLIT_RE.split(text)
        # Odd indexes are the captured CDATA sections
        return ''.join(part if i % 2 else transform(part) for i, part in enumerate(parts))

    def _normalize_segment(self, segment: str) -> str:
        segment = _START_TAG_RE.sub(self._normalize_start_tag, segment)
        segment = _ENTITY_RE.sub(self._numeric_entity, segment)
        return _BARE_AMP_RE.sub('&amp;', segment)

    def _normalize_start_tag(self, match: re.Match) -> str:
        tag, attrs, self_closing = match.groups()
        if not attrs.strip():
            return match.group(0)

        rendered = []
        for token in _ATTR_TOKEN_RE.finditer(attrs):
            name, raw = token.group(1), token.group(2)
            if raw is None:
                if not self.config.allow_boolean_attributes:
                    return match.group(0)
                value = 'true'
            elif raw[0] in '"\'':
                value = raw[1:-1]
            else:
                value = raw
            value = value.replace('<', '&lt;')
            quote = "'" if '"' in value else '"'
            rendered.append(f' {name}={quote}{value}{quote}')

        return f"<{tag}{''.join(rendered)}{self_closing}>"

    @staticmethod
    def _numeric_entity(match: re.Match) -> str:
        name = match.group(1)
        if name in _XML_ENTITIES:
            return match.group(0)
        codepoint = name2codepoint.get(name)
        return f'&#{codepoint};' if codepoint is not None else match.group(0)

    @staticmethod
    def _declare_prefixes(text: str) -> str:
        declared = {prefix for prefix, _ in _XMLNS_RE.findall(text) if prefix}
        used = list(dict.fromkeys(_TAG_PREFIX_RE.findall(text) + _ATTR_PREFIX_RE.findall(text)))
        missing = [p for p in used if p not in declared and p.lower() not in _RESERVED_PREFIXES]
        if not missing:
            return text

        root_end = TreeBuilder._root_start_end(text)
        if root_end is None:
            return text
        logger.debug("Declaring namespace prefixes: %s", ', '.join(missing))
        declarations = ''.join(f' xmlns:{p}="urn:{p}"' for p in missing)
        return text[:root_end] + declarations + text[root_end:]

    @staticmethod
    def _root_start_end(text: str) -> int | None:
        """End offset of the root element's tag name, skipping the prolog."""
        for m in _PROLOG_OR_TAG_RE.finditer(text):
            if m.group(1):
                return m.end(1)
        return None

    # ── Conversion ───────────────────────────────────────────────────────

    @staticmethod
    def _namespace_map(text: str) -> dict[str, str]:
        """Map namespace URI → prefix ('' for a default namespace)."""
        return {uri: prefix or '' for prefix, uri in _XMLNS_RE.findall(text)}

    @staticmethod
    def _qualify(name: str, uri_map: dict[str, str]) -> str:
        if not name.startswith('{'):
            return name
        uri, local = name[1:].split('}', 1)
        prefix = uri_map.get(uri, '')
        return f"{prefix}:{local}" if prefix else local

    def _convert(self, elem: ET.Element, uri_map: dict[str, str]) -> MarkupElement:
        attributes = tuple(
            MarkupAttribute(self._qualify(key, uri_map), self._clean(value))
            for key, value in elem.attrib.items()
        )

        children: list[MarkupNode] = []
        self._append_text(children, elem.text)
        for child in elem:
            if not isinstance(child.tag, str):
                # Comments and processing instructions
                self._append_text(children, child.tail)
                continue
            children.append(self._convert(child, uri_map))
            self._append_text(children, child.tail)

        return MarkupElement(
            tag=self._qualify(elem.tag, uri_map),
            attributes=attributes,
            children=tuple(children),
        )

    def _append_text(self, children: list[MarkupNode], text: str | None) -> None:
        if text and text.strip():
            children.append(MarkupText(self._clean(text)))

    def _clean(self, value: str) -> str:
        return value.strip() if self.config.trim_values else value
