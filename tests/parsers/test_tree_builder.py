"""Tests for TreeBuilder."""

import pytest

from visualforce_parser.config import DEFAULT_CONFIG
from visualforce_parser.domain.markup_tree import MarkupElement, MarkupText
from visualforce_parser.parsers.tree_builder import (
    MalformedMarkupError,
    MissingRootError,
    TreeBuildError,
    TreeBuilder,
)
from tests.conftest import SIMPLE_PAGE, SCRIPT_PAGE


class TestTreeBuilder:
    """Tests for building page trees."""

    def setup_method(self):
        self.builder = TreeBuilder()

    def test_root_is_page_element(self):
        root = self.builder.build(SIMPLE_PAGE)
        assert root.tag == 'apex:page'
        assert root.namespace == 'apex'
        assert root.name == 'page'
        assert root.get('standardController') == 'Account'

    def test_children_keep_prefixed_tags(self):
        root = self.builder.build(SIMPLE_PAGE)
        form = next(root.element_children())
        assert form.tag == 'apex:form'
        assert [c.tag for c in form.element_children()] == ['apex:inputField', 'apex:commandButton']

    def test_component_root_accepted(self):
        root = self.builder.build('<apex:component><apex:attribute name="x" type="String"/></apex:component>')
        assert root.tag == 'apex:component'

    def test_boolean_attribute_gets_value(self):
        root = self.builder.build('<apex:page showHeader="false"><apex:inputCheckbox disabled/></apex:page>')
        checkbox = next(root.element_children())
        assert checkbox.get('disabled') == 'true'

    def test_unquoted_attribute_value(self):
        root = self.builder.build('<apex:page sidebar=false></apex:page>')
        assert root.get('sidebar') == 'false'

    def test_operators_inside_attribute_values(self):
        root = self.builder.build(
            '<apex:page><apex:outputText rendered="{!a && count < 5}" value="x"/></apex:page>'
        )
        text = next(root.element_children())
        assert text.get('rendered') == '{!a && count < 5}'

    def test_html_entities_in_text(self):
        root = self.builder.build('<apex:page>&nbsp;Tom &amp; Jerry &copy;</apex:page>')
        assert list(root.text_children()) == [MarkupText('Tom & Jerry ©')]

    def test_script_body_is_opaque(self):
        root = self.builder.build(
            '<apex:page><script>if (a < b && c) { x = "<div>"; }</script></apex:page>'
        )
        script = next(root.element_children())
        assert script.tag == 'script'
        assert list(script.element_children()) == []
        assert next(script.text_children()).text == 'if (a < b && c) { x = "<div>"; }'

    def test_empty_script_element(self):
        root = self.builder.build(SCRIPT_PAGE)
        tags = [c.tag for c in root.element_children()]
        assert tags == ['script', 'script', 'apex:includeScript']

    def test_comments_are_skipped(self):
        root = self.builder.build('<apex:page><!-- <apex:form/> --><apex:form/></apex:page>')
        assert len(list(root.element_children())) == 1

    def test_comment_with_tags_before_root(self):
        root = self.builder.build(
            '<!-- old: <apex:page standardController="X"> <b>note</b> -->\n'
            '<apex:page standardController="Account"><apex:form/></apex:page>'
        )
        assert root.tag == 'apex:page'
        assert root.get('standardController') == 'Account'
        assert [c.tag for c in root.element_children()] == ['apex:form']

    def test_declaration_and_doctype_before_root(self):
        root = self.builder.build(
            '<?xml version="1.0"?>\n<!DOCTYPE html>\n<apex:page><c:banner/></apex:page>'
        )
        assert [c.tag for c in root.element_children()] == ['c:banner']

    def test_byte_order_mark_ignored(self):
        root = self.builder.build('\ufeff<apex:page/>')
        assert root.tag == 'apex:page'

    def test_values_trimmed_by_default(self):
        root = self.builder.build('<apex:page label="  Padded  "/>')
        assert root.get('label') == 'Padded'

    def test_values_kept_when_trimming_disabled(self):
        builder = TreeBuilder(DEFAULT_CONFIG.with_overrides(trim_values=False))
        root = builder.build('<apex:page label="  Padded  "/>')
        assert root.get('label') == '  Padded  '

    def test_default_namespace_elements_unprefixed(self):
        root = self.builder.build(
            '<apex:page xmlns="http://www.w3.org/1999/xhtml"><div class="x"/></apex:page>'
        )
        div = next(root.element_children())
        assert div.tag == 'div'
        assert div.is_namespaced is False


class TestTreeBuilderFailures:
    """Tests for reported build failures."""

    def setup_method(self):
        self.builder = TreeBuilder()

    def test_unterminated_tag_is_malformed(self):
        with pytest.raises(MalformedMarkupError):
            self.builder.build('<apex:page><apex:form></apex:page>')

    def test_empty_text_is_malformed(self):
        with pytest.raises(MalformedMarkupError):
            self.builder.build('')

    def test_unrecognized_root(self):
        with pytest.raises(MissingRootError):
            self.builder.build('<html><body>{!Account.Name}</body></html>')

    def test_errors_share_base_class(self):
        assert issubclass(MalformedMarkupError, TreeBuildError)
        assert issubclass(MissingRootError, TreeBuildError)

    def test_result_is_typed_tree(self):
        assert isinstance(self.builder.build(SIMPLE_PAGE), MarkupElement)
