"""Typed markup tree produced by the tree builder.

The XML facility yields loosely shaped elements (text and tail strings,
``{uri}local`` tags). The builder converts them into this small variant so
the traversal only ever sees three node shapes:

  - ``MarkupElement``   → tag, ordered attributes, children
  - ``MarkupText``      → a text run between or inside elements
  - ``MarkupAttribute`` → one attribute name/value pair
"""

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class MarkupAttribute:
    name: str
    value: str


@dataclass(frozen=True)
class MarkupText:
    text: str


@dataclass(frozen=True)
class MarkupElement:
    tag: str
    attributes: tuple[MarkupAttribute, ...] = ()
    children: tuple['MarkupNode', ...] = ()

    @property
    def namespace(self) -> str | None:
        """Prefix of a ``ns:name`` tag, or None for plain tags."""
        if ':' not in self.tag:
            return None
        return self.tag.split(':', 1)[0]

    @property
    def name(self) -> str:
        return self.tag.split(':', 1)[-1]

    @property
    def is_namespaced(self) -> bool:
        return bool(self.namespace) and bool(self.name)

    def get(self, attribute: str, default: str | None = None) -> str | None:
        for attr in self.attributes:
            if attr.name == attribute:
                return attr.value
        return default

    def attribute_map(self) -> dict[str, str]:
        return {attr.name: attr.value for attr in self.attributes}

    def element_children(self) -> Iterator['MarkupElement']:
        return (c for c in self.children if isinstance(c, MarkupElement))

    def text_children(self) -> Iterator[MarkupText]:
        return (c for c in self.children if isinstance(c, MarkupText))


MarkupNode = MarkupElement | MarkupText
