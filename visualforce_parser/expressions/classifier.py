"""Merge-field expression classification.

Finds every ``{! ... }`` expression in a text value and sorts it into one of
four structural classes without parsing the expression language:

  - function call      ``URLFOR($Resource.logo)``, ``save()``
  - boolean expression ``a && b``, ``NOT isNew``, ``count > 0``
  - property path      ``Account.Name``, ``$User.Email``
  - simple reference   ``save``, ``accounts``

Checks run in that order, so ``acct.Active__c == true`` is a boolean
expression even though it also contains a property path.
"""

from dataclasses import dataclass, field

from visualforce_parser.domain.constants import (
    BOOLEAN_SYMBOLS,
    BOOLEAN_WORD_RE,
    EXPRESSION_RE,
    FUNCTION_CALL_RE,
    PROPERTY_PATH_RE,
)
from visualforce_parser.domain.enums import ExpressionKind
from visualforce_parser.domain.models import FieldReference, dedupe


@dataclass(frozen=True)
class ClassifiedExpression:
    content: str
    kind: ExpressionKind


def find_expressions(text: str) -> list[str]:
    """Return the trimmed content of every non-blank expression in ``text``."""
    if not text:
        return []
    return [m.group(1).strip() for m in EXPRESSION_RE.finditer(text) if m.group(1).strip()]


def first_expression(text: str) -> str | None:
    """Return the content of the first expression in ``text``, if any."""
    found = find_expressions(text)
    return found[0] if found else None


def classify_expression(content: str) -> ExpressionKind:
    content = content.strip()
    if FUNCTION_CALL_RE.match(content):
        return ExpressionKind.FUNCTION_CALL
    if BOOLEAN_WORD_RE.search(content) or any(s in content for s in BOOLEAN_SYMBOLS):
        return ExpressionKind.BOOLEAN
    if PROPERTY_PATH_RE.search(content):
        return ExpressionKind.PROPERTY_PATH
    return ExpressionKind.SIMPLE_REFERENCE


def complexity_rank(expression: str) -> int:
    """2 for anything with a call, 1 for a dotted access, 0 otherwise."""
    if '(' in expression:
        return 2
    if '.' in expression:
        return 1
    return 0


def rank_expressions(expressions: list[str]) -> list[str]:
    """Deduplicate, then order by descending complexity (stable within a rank)."""
    return sorted(dedupe(expressions), key=lambda e: -complexity_rank(e))


@dataclass
class ExpressionCollector:
    """Accumulates classified expressions for a single parse call.

    Function calls, boolean expressions and property paths go to
    ``apex_expressions``. Simple references become ``FieldReference``
    entries tagged with the context they were found in.
    """

    apex_expressions: list[str] = field(default_factory=list)
    field_references: list[FieldReference] = field(default_factory=list)

    def scan(self, text: str, context: str) -> list[ClassifiedExpression]:
        classified = []
        for content in find_expressions(text):
            kind = classify_expression(content)
            if kind is ExpressionKind.SIMPLE_REFERENCE:
                self.field_references.append(FieldReference(expression=content, context=context))
            else:
                self.apex_expressions.append(content)
            classified.append(ClassifiedExpression(content, kind))
        return classified
