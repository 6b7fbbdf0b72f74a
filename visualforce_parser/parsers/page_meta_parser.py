"""
Parser for Visualforce page metadata files.

This module provides the PageMetaParser class for extracting data from the
``.page-meta.xml`` companion of a page (API version, label, description).
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass


@dataclass(frozen=True)
class PageMetadata:
    """Metadata declared next to a page or component."""

    api_version: str | None = None
    label: str | None = None
    description: str | None = None
    available_in_touch: bool = False
    confirmation_token_required: bool = False


class PageMetaParser:
    """
    Parser for ApexPage / ApexComponent metadata documents.
    """

    METADATA_NS = '{http://soap.sforce.com/2006/04/metadata}'
    ROOT_TAGS = {'ApexPage', 'ApexComponent'}

    def parse(self, meta_xml: str) -> PageMetadata:
        """
        Parse metadata XML content.

        Args:
            meta_xml: Content of the metadata file

        Returns:
            PageMetadata with the declared values

        Raises:
            ValueError: If the root element is not ApexPage or ApexComponent
            xml.etree.ElementTree.ParseError: If the content is not XML
        """
        root = ET.fromstring(meta_xml.strip())

        tag = root.tag.split('}')[1] if '}' in root.tag else root.tag
        if tag not in self.ROOT_TAGS:
            raise ValueError(f"No ApexPage element found (root is <{tag}>)")

        return PageMetadata(
            api_version=self._get_text(root, 'apiVersion'),
            label=self._get_text(root, 'label'),
            description=self._get_text(root, 'description'),
            available_in_touch=self._get_text(root, 'availableInTouch') == 'true',
            confirmation_token_required=self._get_text(root, 'confirmationTokenRequired') == 'true',
        )

    def _get_text(self, root: ET.Element, name: str) -> str | None:
        """Text of a direct child, with or without the metadata namespace."""
        elem = root.find(f'{self.METADATA_NS}{name}')
        if elem is None:
            elem = root.find(name)
        if elem is None or elem.text is None:
            return None
        return elem.text.strip() or None


def parse_page_metadata(meta_xml: str) -> PageMetadata:
    return PageMetaParser().parse(meta_xml)
