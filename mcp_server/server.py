"""
Visualforce Parser MCP Server.

Exposes the page extraction engine to LLM clients via the Model Context
Protocol. Page markup and controller source arrive as tool arguments; the
server reads no files.

Usage:
    python -m mcp_server.server
"""

from __future__ import annotations

import json

from mcp.server.fastmcp import FastMCP

from visualforce_parser import DEFAULT_CONFIG, parse
from visualforce_parser.content_hash import ContentHashService
from visualforce_parser.output.page_summary import build_page_summary
from visualforce_parser.parsers.apex_class_parser import ApexClassInfo, parse_apex_class

# ── Globals ─────────────────────────────────────────────────────────────

mcp = FastMCP("visualforce-parser")


def _truncate(data: dict | list, max_chars: int = 80_000) -> dict | list | str:
    text = json.dumps(data, ensure_ascii=False)
    if len(text) <= max_chars:
        return data
    return {
        "_truncated": True,
        "_message": f"Response too large ({len(text):,} chars). Use summarize_visualforce_page instead.",
    }


def _class_to_dict(info: ApexClassInfo) -> dict:
    return {
        "name": info.name,
        "properties": [
            {"name": p.name, "type": p.type, "visibility": p.visibility,
             "modifiers": p.modifiers, "description": p.description}
            for p in info.properties
        ],
        "methods": [
            {"name": m.name, "return_type": m.return_type, "visibility": m.visibility,
             "parameters": m.parameters, "modifiers": m.modifiers,
             "annotations": m.annotations, "description": m.description}
            for m in info.methods
        ],
        "inner_classes": [_class_to_dict(inner) for inner in info.inner_classes],
    }


# ── Tools ───────────────────────────────────────────────────────────────


@mcp.tool()
def parse_visualforce_page(markup: str, size_threshold: int | None = None) -> dict | str:
    """Extract the full semantic model of a Visualforce page.

    Returns controllers, components, field references, page blocks, scripts,
    expressions and resolved object/field dependencies. ``extraction_mode``
    tells whether the markup was parsed structurally or by pattern matching.

    Args:
        markup: The page source (.page file content).
        size_threshold: Optional character limit above which only a reduced
                        extraction runs. 0 disables the limit.
    """
    config = DEFAULT_CONFIG
    if size_threshold is not None:
        config = config.with_overrides(size_threshold=size_threshold)
    result = parse(markup, config)
    data = result.to_dict()
    data["content_hash"] = ContentHashService.hash_result(result)
    return _truncate(data)


@mcp.tool()
def summarize_visualforce_page(
    name: str,
    markup: str,
    controller_source: str | None = None,
    controller_name: str | None = None,
) -> dict | str:
    """Get a documentation summary of a Visualforce page.

    Smaller than parse_visualforce_page: structure, dependencies and, when
    the controller source is given, its bindable properties and methods.

    Args:
        name: Page name (file name without .page).
        markup: The page source.
        controller_source: Optional Apex source of the page's controller.
        controller_name: Class name of the controller; defaults to the
                         controller declared on the page.
    """
    result = parse(markup)
    apex_info = None
    if controller_source:
        class_name = controller_name or result.custom_controller_name or result.controller_name or name
        apex_info = parse_apex_class(controller_source, class_name)
    return _truncate(build_page_summary(name, result, apex_info))


@mcp.tool()
def parse_apex_controller(source: str, class_name: str) -> dict | str:
    """List the properties, methods and inner classes of an Apex class.

    Args:
        source: Apex class source (.cls file content).
        class_name: Class name, used when no declaration is found.
    """
    return _truncate(_class_to_dict(parse_apex_class(source, class_name)))


# ── Entry point ─────────────────────────────────────────────────────────

def main():
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
