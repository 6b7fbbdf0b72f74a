"""Tests for ContentHashService."""

from visualforce_parser import parse
from visualforce_parser.content_hash import ContentHashService
from visualforce_parser.domain.enums import ExtractionMode
from visualforce_parser.domain.models import ParsedResult
from tests.conftest import SIMPLE_PAGE


class TestContentHashService:
    """Tests for content hashing."""

    def test_hash_markup_returns_hex_string(self):
        result = ContentHashService.hash_markup(SIMPLE_PAGE)
        assert isinstance(result, str)
        assert len(result) == 128  # SHA-512 hex

    def test_line_endings_ignored(self):
        assert ContentHashService.hash_markup('a\r\nb\rc') == ContentHashService.hash_markup('a\nb\nc')

    def test_same_result_same_hash(self):
        assert ContentHashService.hash_result(parse(SIMPLE_PAGE)) == ContentHashService.hash_result(parse(SIMPLE_PAGE))

    def test_different_results_different_hash(self):
        h1 = ContentHashService.hash_result(ParsedResult(controller_name='Account'))
        h2 = ContentHashService.hash_result(ParsedResult(controller_name='Contact'))
        assert h1 != h2

    def test_excludes_volatile_fields(self):
        """How a result was produced should not affect its hash."""
        h1 = ContentHashService.hash_result(ParsedResult(controller_name='Account'))
        h2 = ContentHashService.hash_result(ParsedResult(
            controller_name='Account',
            extraction_mode=ExtractionMode.FALLBACK,
            warnings=['Tree extraction failed'],
        ))
        assert h1 == h2

    def test_hash_data_matches_hash_result(self):
        result = parse(SIMPLE_PAGE)
        assert ContentHashService.hash_data(result.to_dict()) == ContentHashService.hash_result(result)
