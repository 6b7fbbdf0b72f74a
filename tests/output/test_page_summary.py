"""Tests for build_page_summary."""

from visualforce_parser import parse
from visualforce_parser.output.page_summary import UNKNOWN_CONTROLLER, build_page_summary
from visualforce_parser.parsers.apex_class_parser import parse_apex_class
from tests.conftest import APEX_CONTROLLER, INTERACTIVE_PAGE, NESTED_BLOCKS_PAGE, SCRIPT_PAGE


class TestBuildPageSummary:
    """Tests for the documentation summary."""

    def test_custom_controller_preferred(self):
        summary = build_page_summary('Pipeline', parse(INTERACTIVE_PAGE))
        assert summary['controller'] == 'OpportunityController'
        assert summary['standard_controller'] is None
        assert summary['extensions'] == ['ExtA', 'ExtB']

    def test_standard_controller_used(self):
        summary = build_page_summary('AccountEdit', parse(NESTED_BLOCKS_PAGE))
        assert summary['controller'] == 'Account'

    def test_unknown_controller(self):
        summary = build_page_summary('Scripts', parse(SCRIPT_PAGE))
        assert summary['controller'] == UNKNOWN_CONTROLLER
        assert summary['scripts'][1] == {'type': 'InlineScript', 'value': 'alert(1)'}

    def test_page_structure(self):
        summary = build_page_summary('Pipeline', parse(INTERACTIVE_PAGE))
        assert summary['page_structure'] == {
            'forms': 1,
            'inputs': ['selectedStage'],
            'buttons': ['exportCsv'],
        }
        assert summary['action_supports'][0]['event'] == 'onchange'
        assert [p['id'] for p in summary['output_panels']] == ['results', 'details', 'empty']

    def test_page_block_items(self):
        summary = build_page_summary('AccountEdit', parse(NESTED_BLOCKS_PAGE))
        assert summary['page_blocks'] == [
            {'title': 'Outer', 'items': ['apex:pageBlock']},
            {'title': 'Inner', 'items': ['apex:inputField']},
        ]

    def test_dependencies(self):
        summary = build_page_summary('Pipeline', parse(INTERACTIVE_PAGE))
        assert summary['dependencies'] == {
            'objects': ['selected'],
            'detailed_fields': ['selected.Name', 'selected.Amount'],
            'components': ['pipelineChart'],
        }

    def test_controller_members(self):
        apex_info = parse_apex_class(APEX_CONTROLLER, 'AccountController')
        summary = build_page_summary('AccountEdit', parse(NESTED_BLOCKS_PAGE), apex_info)
        assert [p['name'] for p in summary['properties']] == ['acct', 'contacts']
        assert summary['methods'][1] == {
            'name': 'search',
            'type': 'List<Account>',
            'parameters': 'String term, Integer max',
            'description': 'Method search returning List<Account>',
        }

    def test_without_controller_members(self):
        summary = build_page_summary('AccountEdit', parse(NESTED_BLOCKS_PAGE))
        assert summary['properties'] == []
        assert summary['methods'] == []
