"""
Parser for Apex controller classes.

This module provides the ApexClassParser class, which pulls the members a
page can bind to (auto-properties and methods) out of Apex source with
pattern matching. Inner classes are parsed recursively; their members are
not attributed to the enclosing class.
"""

import re
from dataclasses import dataclass, field

_DOC_COMMENT = r'(/\*\*(?:(?!\*/)[\s\S])*\*/)?\s*'
_ANNOTATIONS = r'((?:@\w+(?:\([^)]*\))?\s+)*)'
_VISIBILITY = r'(public|private|protected|global)\s+'
_MODIFIERS = r'((?:(?:static|final|override|virtual|abstract|transient|webservice|testmethod)\s+)*)'
_TYPE = r'([\w.]+(?:\s*<[\w.<>,\s]*>)?(?:\[\])?)'

PROPERTY_RE = re.compile(
    _DOC_COMMENT + _ANNOTATIONS + _VISIBILITY + _MODIFIERS + _TYPE
    + r'\s+(\w+)\s*\{\s*(?:\w+\s+)?get\s*;\s*(?:\w+\s+)?set\s*;\s*\}',
    re.I,
)
METHOD_RE = re.compile(
    _DOC_COMMENT + _ANNOTATIONS + _VISIBILITY + _MODIFIERS + _TYPE
    + r'\s+(\w+)\s*\(([^)]*)\)\s*\{',
    re.I,
)
CLASS_RE = re.compile(
    r'\b(?:(?:public|private|protected|global)\s+)?'
    r'(?:(?:with|without|inherited)\s+sharing\s+)?'
    r'(?:(?:virtual|abstract)\s+)?'
    r'class\s+(\w+)[^{;]*\{',
    re.I,
)
_DOC_DECORATION_RE = re.compile(r'/\*\*|\*/')
_DOC_LINE_PREFIX_RE = re.compile(r'^\s*\*\s?', re.M)


@dataclass
class ApexProperty:
    name: str
    type: str
    visibility: str
    modifiers: list[str] = field(default_factory=list)
    description: str = ''


@dataclass
class ApexMethod:
    name: str
    return_type: str
    visibility: str
    parameters: str = ''
    modifiers: list[str] = field(default_factory=list)
    annotations: list[str] = field(default_factory=list)
    description: str = ''


@dataclass
class ApexClassInfo:
    name: str
    properties: list[ApexProperty] = field(default_factory=list)
    methods: list[ApexMethod] = field(default_factory=list)
    inner_classes: list['ApexClassInfo'] = field(default_factory=list)


class ApexClassParser:
    """
    Parser for Apex class source.

    Extracts auto-properties, methods and inner classes. Constructors and
    properties with custom accessor bodies are not reported.
    """

    def parse(self, source: str, class_name: str) -> ApexClassInfo:
        """
        Parse Apex class source.

        Args:
            source: Apex source of the class file
            class_name: Name of the class (used when no declaration is found)

        Returns:
            ApexClassInfo for the outermost class
        """
        declaration = CLASS_RE.search(source)
        if declaration is None:
            return self._parse_body(source, class_name)

        body_start = declaration.end()
        body_end = _matching_brace(source, body_start - 1)
        return self._parse_body(source[body_start:body_end], declaration.group(1) or class_name)

    def _parse_body(self, body: str, name: str) -> ApexClassInfo:
        info = ApexClassInfo(name=name)

        # Inner class bodies are parsed on their own and blanked out here
        members = body
        position = 0
        while True:
            inner = CLASS_RE.search(body, position)
            if inner is None:
                break
            inner_end = _matching_brace(body, inner.end() - 1)
            info.inner_classes.append(self._parse_body(body[inner.end():inner_end], inner.group(1)))
            members = members[:inner.start()] + ' ' * (inner_end + 1 - inner.start()) + members[inner_end + 1:]
            position = inner_end + 1

        for m in PROPERTY_RE.finditer(members):
            doc, _, visibility, modifiers, prop_type, prop_name = m.groups()
            prop_type = _squash(prop_type)
            info.properties.append(ApexProperty(
                name=prop_name,
                type=prop_type,
                visibility=visibility.lower(),
                modifiers=modifiers.split(),
                description=_clean_doc(doc) or f"Property {prop_name} of type {prop_type}",
            ))

        for m in METHOD_RE.finditer(members):
            doc, annotations, visibility, modifiers, return_type, method_name, params = m.groups()
            return_type = _squash(return_type)
            info.methods.append(ApexMethod(
                name=method_name,
                return_type=return_type,
                visibility=visibility.lower(),
                parameters=_squash(params),
                modifiers=modifiers.split(),
                annotations=[a.split('(')[0] for a in annotations.split()] if annotations else [],
                description=_clean_doc(doc) or f"Method {method_name} returning {return_type}",
            ))

        return info


def parse_apex_class(source: str, class_name: str) -> ApexClassInfo:
    return ApexClassParser().parse(source, class_name)


def _matching_brace(text: str, open_index: int) -> int:
    """Index of the brace closing the one at ``open_index`` (or end of text).

    String literals and comments are skipped.
    """
    depth = 0
    i = open_index
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == "'":
            i += 1
            while i < length and text[i] != "'":
                i += 2 if text[i] == '\\' else 1
        elif text.startswith('//', i):
            newline = text.find('\n', i)
            i = length if newline == -1 else newline
        elif text.startswith('/*', i):
            close = text.find('*/', i + 2)
            i = length if close == -1 else close + 1
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return length


def _clean_doc(doc: str | None) -> str:
    if not doc:
        return ''
    text = _DOC_DECORATION_RE.sub('', doc)
    text = _DOC_LINE_PREFIX_RE.sub('', text)
    return ' '.join(line.strip() for line in text.splitlines() if line.strip())


def _squash(text: str) -> str:
    return ' '.join(text.split())
