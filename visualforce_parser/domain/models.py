"""Shared data models used across parser modules."""

from collections import Counter
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from visualforce_parser.domain.enums import ExtractionMode, ScriptType


@dataclass(frozen=True)
class ComponentUsage:
    """One occurrence of a namespaced component element."""

    namespace: str
    name: str
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}:{self.name}"


@dataclass
class FieldReference:
    """A simple merge-field reference and where it was found.

    ``sobject_name`` / ``field_name`` are backfilled by the dependency
    resolver when the expression can be mapped to an entity field.
    """

    expression: str
    context: str
    sobject_name: str | None = None
    field_name: str | None = None


@dataclass
class PageBlock:
    """A titled section grouping the components declared directly inside it."""

    title: str | None = None
    id: str | None = None
    components: list[ComponentUsage] = field(default_factory=list)


@dataclass(frozen=True)
class ActionSupport:
    """An event-triggered partial page update."""

    event: str | None = None
    re_render: str | None = None
    action: str | None = None
    status: str | None = None


@dataclass(frozen=True)
class OutputPanel:
    """An output grouping element with a short preview of its content."""

    id: str | None = None
    layout: str | None = None
    content_preview: str | None = None


@dataclass(frozen=True)
class ScriptReference:
    """A script or static resource used by the page."""

    type: ScriptType
    value: str


@dataclass
class ParsedResult:
    """Structured model extracted from one page.

    Every list documented as a set holds unique values in first-seen order.
    ``apex_expressions`` is additionally ordered by descending complexity.
    """

    controller_name: str | None = None
    custom_controller_name: str | None = None
    extension_names: list[str] = field(default_factory=list)
    api_version: str | None = None
    page_label: str | None = None

    components: list[ComponentUsage] = field(default_factory=list)
    field_references: list[FieldReference] = field(default_factory=list)
    page_blocks: list[PageBlock] = field(default_factory=list)
    action_supports: list[ActionSupport] = field(default_factory=list)
    output_panels: list[OutputPanel] = field(default_factory=list)
    scripts: list[ScriptReference] = field(default_factory=list)

    form_count: int = 0
    has_remote_objects: bool = False
    has_static_resources: bool = False

    # Sets
    template_fragments: list[str] = field(default_factory=list)
    apex_expressions: list[str] = field(default_factory=list)
    input_bindings: list[str] = field(default_factory=list)
    button_actions: list[str] = field(default_factory=list)
    custom_components: list[str] = field(default_factory=list)
    sobject_references: list[str] = field(default_factory=list)
    detailed_field_references: list[str] = field(default_factory=list)

    extraction_mode: ExtractionMode = ExtractionMode.TREE
    warnings: list[str] = field(default_factory=list)

    @property
    def component_count(self) -> int:
        return len(self.components)

    def component_counts(self) -> dict[str, int]:
        """Count component occurrences by qualified name."""
        return dict(Counter(c.qualified_name for c in self.components))

    def components_by_frequency(self) -> list[ComponentUsage]:
        """Components ordered by how often their qualified name occurs.

        The sort is stable, so equally frequent components keep document order.
        """
        counts = self.component_counts()
        return sorted(self.components, key=lambda c: -counts[c.qualified_name])

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dict of the result."""
        data = _plain(asdict(self))
        data['component_count'] = self.component_count
        return data


def dedupe(values: list) -> list:
    """Remove duplicates, keeping the first occurrence of each value."""
    return list(dict.fromkeys(values))


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value
