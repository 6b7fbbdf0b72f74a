"""Parser configuration.

A single immutable value built once and shared by every ``parse`` call.
Use ``with_overrides`` to derive a variant (for example a larger size
threshold); the shared default is never modified.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ParserConfig:
    """Options controlling markup extraction."""

    size_threshold: int = 100_000
    root_tags: tuple[str, ...] = ('apex:page', 'apex:component')
    opaque_tags: tuple[str, ...] = ('script', 'style')
    custom_namespaces: tuple[str, ...] = ('c',)
    allow_boolean_attributes: bool = True
    trim_values: bool = True
    preview_length: int = 100
    summary_length: int = 120
    inline_script_length: int = 200

    def with_overrides(self, **changes) -> 'ParserConfig':
        return replace(self, **changes)

    def is_oversize(self, text: str) -> bool:
        return self.size_threshold > 0 and len(text) > self.size_threshold


DEFAULT_CONFIG = ParserConfig()