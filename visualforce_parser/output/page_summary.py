"""Builds the documentation-facing summary of a parsed page."""

from __future__ import annotations

from typing import Any

from visualforce_parser.domain.models import ParsedResult
from visualforce_parser.parsers.apex_class_parser import ApexClassInfo

UNKNOWN_CONTROLLER = 'UnknownController'


def build_page_summary(name: str, result: ParsedResult, apex_info: ApexClassInfo | None = None) -> dict[str, Any]:
    """Summarize one page for documentation.

    The controller is the custom controller when declared, else the standard
    controller, else ``UnknownController``. Properties and methods come from
    the parsed controller class when one is given.
    """
    controller = result.custom_controller_name or result.controller_name or UNKNOWN_CONTROLLER

    properties: list[dict] = []
    methods: list[dict] = []
    if apex_info is not None:
        properties = [
            {'name': p.name, 'type': p.type, 'description': p.description}
            for p in apex_info.properties
        ]
        methods = [
            {'name': m.name, 'type': m.return_type, 'parameters': m.parameters, 'description': m.description}
            for m in apex_info.methods
        ]

    return {
        'name': name,
        'controller': controller,
        'standard_controller': result.controller_name,
        'custom_controller': result.custom_controller_name,
        'extensions': list(result.extension_names),
        'api_version': result.api_version,
        'label': result.page_label,
        'properties': properties,
        'methods': methods,
        'page_structure': {
            'forms': result.form_count,
            'inputs': list(result.input_bindings),
            'buttons': list(result.button_actions),
        },
        'page_blocks': [
            {
                'title': block.title or '',
                'items': [c.qualified_name for c in block.components],
            }
            for block in result.page_blocks
        ],
        'action_supports': [
            {'event': a.event, 're_render': a.re_render, 'action': a.action, 'status': a.status}
            for a in result.action_supports
        ],
        'output_panels': [
            {'id': p.id, 'layout': p.layout, 'content_preview': p.content_preview}
            for p in result.output_panels
        ],
        'scripts': [{'type': s.type.value, 'value': s.value} for s in result.scripts],
        'template_fragments': list(result.template_fragments),
        'dependencies': {
            'objects': list(result.sobject_references),
            'detailed_fields': list(result.detailed_field_references),
            'components': list(result.custom_components),
        },
    }
