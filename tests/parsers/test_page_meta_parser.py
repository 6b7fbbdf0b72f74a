"""Tests for PageMetaParser."""

import xml.etree.ElementTree as ET

import pytest

from visualforce_parser.parsers.page_meta_parser import PageMetaParser, parse_page_metadata
from tests.conftest import PAGE_META_XML


class TestPageMetaParser:
    """Tests for page metadata parsing."""

    def setup_method(self):
        self.parser = PageMetaParser()

    def test_parse_extracts_api_version(self):
        assert self.parser.parse(PAGE_META_XML).api_version == '59.0'

    def test_parse_extracts_label(self):
        assert self.parser.parse(PAGE_META_XML).label == 'Account Editor'

    def test_parse_extracts_description(self):
        assert self.parser.parse(PAGE_META_XML).description == 'Edits accounts'

    def test_parse_extracts_flags(self):
        meta = self.parser.parse(PAGE_META_XML)
        assert meta.available_in_touch is True
        assert meta.confirmation_token_required is False

    def test_parse_without_namespace(self):
        meta = parse_page_metadata('<ApexComponent><apiVersion>45.0</apiVersion></ApexComponent>')
        assert meta.api_version == '45.0'
        assert meta.label is None

    def test_parse_wrong_root_raises(self):
        with pytest.raises(ValueError):
            self.parser.parse('<ApexClass><apiVersion>59.0</apiVersion></ApexClass>')

    def test_parse_invalid_xml_raises(self):
        with pytest.raises(ET.ParseError):
            self.parser.parse('<ApexPage><label>')
