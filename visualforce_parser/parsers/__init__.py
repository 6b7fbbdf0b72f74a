"""Visualforce markup and companion file parsers."""

from visualforce_parser.parsers.tree_builder import (
    MalformedMarkupError,
    MissingRootError,
    TreeBuildError,
    TreeBuilder,
)
from visualforce_parser.parsers.tree_extractor import TreeExtractor
from visualforce_parser.parsers.fallback_extractor import extract_fallback, extract_lightweight
from visualforce_parser.parsers.page_meta_parser import PageMetaParser, PageMetadata, parse_page_metadata
from visualforce_parser.parsers.apex_class_parser import ApexClassInfo, ApexClassParser, parse_apex_class

__all__ = [
    'TreeBuilder', 'TreeBuildError', 'MalformedMarkupError', 'MissingRootError',
    'TreeExtractor', 'extract_fallback', 'extract_lightweight',
    'PageMetaParser', 'PageMetadata', 'parse_page_metadata',
    'ApexClassParser', 'ApexClassInfo', 'parse_apex_class',
]
