"""Shared test fixtures."""

import pytest

from visualforce_parser.config import DEFAULT_CONFIG
from visualforce_parser.parsers.tree_builder import TreeBuilder
from visualforce_parser.parsers.tree_extractor import TreeExtractor


# ── Sample Page Markup ───────────────────────────────────────────────────

SIMPLE_PAGE = (
    '<apex:page standardController="Account"><apex:form>'
    '<apex:inputField value="{!Account.Name}"/>'
    '<apex:commandButton action="{!save}"/>'
    '</apex:form></apex:page>'
)

NESTED_BLOCKS_PAGE = """\
<apex:page standardController="Account">
  <apex:form>
    <apex:pageBlock title="Outer" id="outer">
      <apex:pageBlock title="Inner" id="inner">
        <apex:inputField value="{!Account.Industry}"/>
      </apex:pageBlock>
    </apex:pageBlock>
  </apex:form>
</apex:page>
"""

# The form and inputField are never closed
MALFORMED_PAGE = """\
<apex:page standardController="Contact" extensions="ContactExt">
  <apex:form>
    <apex:pageBlock title="Details">
      <apex:inputField value="{!Contact.Email}">
      <apex:commandButton action="{!save}" value="Save"/>
    </apex:pageBlock>
</apex:page>
"""

SCRIPT_PAGE = """\
<apex:page>
  <script src="foo.js"></script>
  <script>alert(1)</script>
  <apex:includeScript value="{!$Resource.bar}"/>
</apex:page>
"""

INTERACTIVE_PAGE = """\
<apex:page controller="OpportunityController" extensions="ExtA, ExtB" apiVersion="58.0" label="Pipeline">
  <apex:form id="mainForm">
    <apex:selectList value="{!selectedStage}" size="1">
      <apex:actionSupport event="onchange" reRender="results" action="{!refresh}" status="loading"/>
    </apex:selectList>
    <apex:outputPanel id="results" layout="block">
      Showing {!opportunityCount}
      opportunities
    </apex:outputPanel>
    <apex:outputPanel id="details" layout="none">
      <apex:outputText value="{!selected.Name}"/>
      <apex:outputText value="{!selected.Amount}"/>
    </apex:outputPanel>
    <apex:outputPanel id="empty"/>
    <c:pipelineChart stages="{!stages}" rendered="{!NOT(ISBLANK(stages))}"/>
    <apex:commandLink action="{!exportCsv}" value="Export"/>
  </apex:form>
</apex:page>
"""

TEMPLATE_PAGE = """\
<apex:page>
  <apex:composition template="SiteTemplate">
    <apex:define name="body">
      <c:header title="{!$Label.Welcome}"/>
      <apex:insert name="footer"/>
    </apex:define>
  </apex:composition>
</apex:page>
"""

REMOTING_PAGE = """\
<apex:page controller="SearchController">
  <apex:stylesheet value="{!URLFOR($Resource.styles, 'main.css')}"/>
  <script>
    Visualforce.remoting.Manager.invokeAction('{!$RemoteAction.SearchController.find}', term, cb);
    if (a < b && ready) { render(); }
  </script>
</apex:page>
"""

PAGE_META_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<ApexPage xmlns="http://soap.sforce.com/2006/04/metadata">
    <apiVersion>59.0</apiVersion>
    <availableInTouch>true</availableInTouch>
    <confirmationTokenRequired>false</confirmationTokenRequired>
    <label>Account Editor</label>
    <description>Edits accounts</description>
</ApexPage>
"""

APEX_CONTROLLER = """\
public with sharing class AccountController {
    /** The account being edited */
    public Account acct { get; set; }
    public List<Contact> contacts { get; private set; }
    private String mode;

    public AccountController(ApexPages.StandardController std) {
        acct = (Account) std.getRecord();
    }

    /**
     * Saves the account.
     */
    public PageReference save() {
        update acct;
        return null;
    }

    @RemoteAction
    public static List<Account> search(String term, Integer max) {
        String marker = '}';
        return [SELECT Id FROM Account];
    }

    public class Row {
        public String label { get; set; }
        public Integer total() { return 0; }
    }
}
"""


@pytest.fixture
def build_tree():
    """Return a helper that builds a markup tree from text."""
    builder = TreeBuilder(DEFAULT_CONFIG)
    return builder.build


@pytest.fixture
def extract_tree():
    """Return a helper that builds and traverses markup in one step."""
    def _extract(text: str, config=DEFAULT_CONFIG):
        return TreeExtractor(config).extract(TreeBuilder(config).build(text))
    return _extract
