"""Content hashing for pages and parse results."""
import hashlib
import json
from typing import Any

from visualforce_parser.domain.models import ParsedResult


class ContentHashService:
    """Service for generating content hashes."""

    # Fields that describe how a result was produced rather than what it holds
    EXCLUDED_FIELDS = {'warnings', 'extraction_mode'}

    @staticmethod
    def hash_markup(text: str) -> str:
        """Generate SHA-512 hash for markup, ignoring line ending style."""
        normalized = text.replace('\r\n', '\n').replace('\r', '\n')
        return hashlib.sha512(normalized.encode('utf-8')).hexdigest()

    @staticmethod
    def hash_result(result: ParsedResult) -> str:
        """Generate SHA-512 hash for the extracted content of a result."""
        return ContentHashService.hash_data(result.to_dict())

    @staticmethod
    def hash_data(data: dict[str, Any]) -> str:
        """Generate SHA-512 hash for a serialized result (e.g. loaded back from JSON)."""
        normalized = ContentHashService._normalize_data(data)
        json_str = json.dumps(normalized, sort_keys=True, separators=(',', ':'))
        return hashlib.sha512(json_str.encode('utf-8')).hexdigest()

    @staticmethod
    def _normalize_data(data: Any) -> Any:
        """Normalize data by removing excluded fields."""
        if isinstance(data, dict):
            return {
                k: ContentHashService._normalize_data(v)
                for k, v in data.items()
                if k not in ContentHashService.EXCLUDED_FIELDS
            }
        elif isinstance(data, list):
            return [ContentHashService._normalize_data(item) for item in data]
        else:
            return data
