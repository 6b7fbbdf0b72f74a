"""Shared constants, regex patterns, and tag-name configurations.

Centralizes all patterns shared by the tree extractor, the regex fallback,
the script extractor and the dependency resolver.
"""

import re

# ── Expression Patterns ──────────────────────────────────────────────────

# {! content } with permissive whitespace; content cannot hold a closing brace
EXPRESSION_RE = re.compile(r'\{!\s*([^}]+?)\s*\}')

IDENTIFIER = r'[A-Za-z_$][\w$]*'

FUNCTION_CALL_RE = re.compile(rf'^{IDENTIFIER}\(')
BOOLEAN_WORD_RE = re.compile(r'\b(?:AND|OR|NOT)\b', re.I)
BOOLEAN_SYMBOLS = ('&&', '||', '==', '!=', '>', '<')
PROPERTY_PATH_RE = re.compile(rf'{IDENTIFIER}\.{IDENTIFIER}')

# Leading dotted chain: entity, then .field(.subfield)*
DOTTED_PATH_RE = re.compile(rf'^({IDENTIFIER})((?:\.{IDENTIFIER})+)')
PLAIN_IDENTIFIER_RE = re.compile(r'^[A-Za-z_]\w*$')

# ── Page Attribute Patterns (raw text) ───────────────────────────────────

PAGE_OPEN_TAG_RE = re.compile(r'<apex:page\b((?:[^>"\']|"[^"]*"|\'[^\']*\')*)>', re.I)
ATTRIBUTE_RE = re.compile(r'([\w:.-]+)\s*=\s*(?:"([^"]*)"|\'([^\']*)\')')
STANDARD_CONTROLLER_RE = re.compile(r'\bstandardController\s*=\s*["\']([^"\']*)["\']')
CUSTOM_CONTROLLER_RE = re.compile(r'\bcontroller\s*=\s*["\']([^"\']*)["\']')
EXTENSIONS_RE = re.compile(r'\bextensions\s*=\s*["\']([^"\']*)["\']')

# ── Component Patterns (raw text) ────────────────────────────────────────

COMPONENT_NAME_RE = re.compile(r'<([A-Za-z][\w-]*):([A-Za-z][\w-]*)')
INPUT_BINDING_RE = re.compile(
    r'<[\w-]+:(?:input|select)\w*\b[^>]*?\bvalue\s*=\s*(?:"[^"]*?|\'[^\']*?)\{!\s*([^}]+?)\s*\}',
)
BUTTON_ACTION_RE = re.compile(
    r'<[\w-]+:command(?:Button|Link)\b[^>]*?\baction\s*=\s*(?:"[^"]*?|\'[^\']*?)\{!\s*([^}]+?)\s*\}',
)
ACTION_SUPPORT_TAG_RE = re.compile(r'<apex:actionSupport\b((?:[^>"\']|"[^"]*"|\'[^\']*\')*)>')
OUTPUT_PANEL_OPEN_RE = re.compile(r'<apex:outputPanel\b((?:[^>"\']|"[^"]*"|\'[^\']*\')*?)(/?)>')
OUTPUT_PANEL_CLOSE_RE = re.compile(r'</apex:outputPanel\s*>')
PAGE_BLOCK_TAG_RE = re.compile(r'<apex:pageBlock\b((?:[^>"\']|"[^"]*"|\'[^\']*\')*)>')
FORM_OPEN_RE = re.compile(r'<apex:form\b', re.I)

# ── Script & Resource Patterns ───────────────────────────────────────────

SCRIPT_ELEMENT_RE = re.compile(
    r'<script\b((?:[^>"\']|"[^"]*"|\'[^\']*\')*?)(?:/>|>([\s\S]*?)</script\s*>)',
    re.I,
)
SCRIPT_SRC_RE = re.compile(r'\bsrc\s*=\s*["\']([^"\']+)["\']', re.I)
INCLUDE_DIRECTIVE_RE = re.compile(
    r'<apex:(?:includeScript|stylesheet)\b[^>]*?\bvalue\s*=\s*(?:"([^"]*)"|\'([^\']*)\')',
)
RESOURCE_REF_RE = re.compile(r'\$Resource\.([\w]+)')
EXTERNAL_URL_RE = re.compile(r'^\s*(https?://\S+)', re.I)

REMOTING_MARKERS = ('apex:remoteObjectModel', 'apex:remoteObjects', 'Visualforce.remoting')
STATIC_RESOURCE_MARKERS = ('$Resource.', 'apex:stylesheet', 'apex:includeScript')

# ── Template Fragment Patterns ───────────────────────────────────────────

TEMPLATE_FRAGMENT_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r'<apex:composition\s+[^>]*?\btemplate\s*=\s*["\']([^"\']+)["\']'), 'Template'),
    (re.compile(r'<apex:insert\s+[^>]*?\bname\s*=\s*["\']([^"\']+)["\']'), 'Insert Point'),
    (re.compile(r'<apex:define\s+[^>]*?\bname\s*=\s*["\']([^"\']+)["\']'), 'Content Definition'),
    (re.compile(r'<apex:composition\s+[^>]*?\bdefine\s*=\s*["\']([^"\']+)["\']'), 'Composition Definition'),
]

# ── Tag Names ────────────────────────────────────────────────────────────

BLOCK_TAGS = {'apex:pageBlock'}
FORM_TAGS = {'apex:form'}
ACTION_SUPPORT_TAGS = {'apex:actionSupport'}
OUTPUT_PANEL_TAGS = {'apex:outputPanel'}
COMMAND_NAMES = {'commandButton', 'commandLink'}
INPUT_NAME_PREFIXES = ('input', 'select')

ELLIPSIS = '...'
FALLBACK_CONTEXT = 'document'
