"""Semantic extraction for Visualforce page markup."""

from visualforce_parser.config import DEFAULT_CONFIG, ParserConfig
from visualforce_parser.domain.models import ParsedResult
from visualforce_parser.engine import parse

__all__ = ['parse', 'ParserConfig', 'DEFAULT_CONFIG', 'ParsedResult']
