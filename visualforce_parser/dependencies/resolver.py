"""Dependency resolution for parsed pages.

Derives the entities a page touches (``Account``) and the fully qualified
fields it reads (``Account.Owner.Name``) from its field references and
dotted property paths.
"""

from dataclasses import dataclass

from visualforce_parser.domain.constants import DOTTED_PATH_RE, PLAIN_IDENTIFIER_RE
from visualforce_parser.domain.enums import ExpressionKind
from visualforce_parser.domain.models import FieldReference, ParsedResult, dedupe
from visualforce_parser.expressions.classifier import classify_expression


@dataclass(frozen=True)
class ResolvedDependencies:
    """Entities and entity.field pairs referenced by a page."""

    sobject_references: tuple[str, ...]
    detailed_field_references: tuple[str, ...]


class DependencyResolver:
    """Maps merge-field references to entity/field pairs.

    Global merge fields (``$User.Name``, ``$Resource.logo``) are not entity
    references and are left unresolved. Nothing here raises: a reference that
    cannot be mapped keeps ``sobject_name`` / ``field_name`` unset.
    """

    def resolve(
        self,
        field_references: list[FieldReference],
        controller_name: str | None = None,
        property_paths: list[str] | None = None,
    ) -> ResolvedDependencies:
        """Resolve references and backfill each FieldReference in place.

        Args:
            field_references: Simple references collected by the classifier.
            controller_name: Standard controller of the page, if any.
            property_paths: Dotted property-path expressions.

        Returns:
            ResolvedDependencies with deduplicated entities and fields.
        """
        sobjects: list[str] = []
        fields: list[str] = []

        controller = (controller_name or '').strip()
        if controller and '.' not in controller:
            sobjects.append(controller)
        else:
            controller = ''

        for ref in field_references:
            split = self.split_reference(ref.expression)
            if split:
                entity, field_path = split
                sobjects.append(entity)
            elif controller and PLAIN_IDENTIFIER_RE.match(ref.expression):
                entity, field_path = controller, ref.expression
            else:
                continue
            fields.append(f"{entity}.{field_path}")
            ref.sobject_name = entity
            ref.field_name = field_path

        for path in property_paths or []:
            split = self.split_path(path)
            if split:
                sobjects.append(split[0])
                fields.append(f"{split[0]}.{split[1]}")

        return ResolvedDependencies(tuple(dedupe(sobjects)), tuple(dedupe(fields)))

    def apply(self, result: ParsedResult) -> None:
        """Resolve a parsed result's references and merge them into its sets."""
        property_paths = [
            e for e in result.apex_expressions
            if classify_expression(e) is ExpressionKind.PROPERTY_PATH
        ]
        resolved = self.resolve(result.field_references, result.controller_name, property_paths)
        result.sobject_references = dedupe(result.sobject_references + list(resolved.sobject_references))
        result.detailed_field_references = dedupe(
            result.detailed_field_references + list(resolved.detailed_field_references)
        )

    @staticmethod
    def split_path(expression: str) -> tuple[str, str] | None:
        """Split ``Entity.field.path`` into ``('Entity', 'field.path')``."""
        m = DOTTED_PATH_RE.match(expression.strip())
        if not m or m.group(1).startswith('$'):
            return None
        return m.group(1), m.group(2)[1:]

    @staticmethod
    def split_reference(expression: str) -> tuple[str, str] | None:
        """Split a field reference on its first ``.``, e.g. ``items.0`` into ``('items', '0')``."""
        split = DependencyResolver.split_path(expression)
        if split:
            return split
        entity, dot, field_path = expression.strip().partition('.')
        entity, field_path = entity.strip(), field_path.strip()
        if not dot or not entity or not field_path or entity.startswith('$'):
            return None
        return entity, field_path
