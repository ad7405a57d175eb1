"""Shared test fixtures."""

import io
import zipfile
from typing import Iterable, Optional

import pytest

from iflow_parser.document_parser import DocumentParser


# ── Sample Definition Content ────────────────────────────────────────────

HEADER = """\
<?xml version="1.0" encoding="UTF-8"?>
<bpmn2:definitions xmlns:bpmn2="http://www.omg.org/spec/BPMN/20100524/MODEL" \
xmlns:ifl="http:///com.sap.ifl.model/Ifl.xsd" id="Definitions_1">
"""

FULL_IFLW = HEADER + """\
  <bpmn2:collaboration id="Collaboration_1" name="Default Collaboration">
    <bpmn2:extensionElements>
      <ifl:property><key>namespaceMapping</key><value/></ifl:property>
      <ifl:property><key>returnExceptionToSender</key><value>false</value></ifl:property>
      <ifl:property><key>log</key><value>All events</value></ifl:property>
      <ifl:property><key>ServerTrace</key><value>false</value></ifl:property>
      <ifl:property><key>corsEnabled</key><value>true</value></ifl:property>
      <ifl:property><key>componentVersion</key><value>1.2</value></ifl:property>
    </bpmn2:extensionElements>
    <bpmn2:participant id="Participant_1" ifl:type="EndpointSender" name="Sender"/>
    <bpmn2:participant id="Participant_Process_1" ifl:type="IntegrationProcess" name="Integration Process" processRef="Process_1"/>
    <bpmn2:messageFlow id="MessageFlow_1" name="HTTPS" sourceRef="Participant_1" targetRef="StartEvent_1">
      <bpmn2:extensionElements>
        <ifl:property><key>ComponentType</key><value>HTTPS</value></ifl:property>
        <ifl:property><key>Name</key><value>HTTPS_IN</value></ifl:property>
        <ifl:property><key>direction</key><value>Sender</value></ifl:property>
        <ifl:property><key>senderAuthType</key><value>ClientCertificate</value></ifl:property>
        <ifl:property><key>userRole</key><value>ESBMessaging.send</value></ifl:property>
        <ifl:property><key>xsrfProtection</key><value>0</value></ifl:property>
        <ifl:property><key>maximumBodySize</key><value>40</value></ifl:property>
        <ifl:property><key>urlPath</key><value>/orders</value></ifl:property>
        <ifl:property><key>cmdVariantUri</key><value>ctype::AdapterVariant/cname::sap:HTTPS/tp::HTTPS/mp::None/direction::Sender/version::1.4.1</value></ifl:property>
      </bpmn2:extensionElements>
    </bpmn2:messageFlow>
    <bpmn2:messageFlow id="MessageFlow_2" name="OData" sourceRef="ServiceTask_1" targetRef="Participant_2">
      <bpmn2:extensionElements>
        <ifl:property><key>ComponentType</key><value>HCIOData</value></ifl:property>
        <ifl:property><key>Name</key><value>ODATA_OUT</value></ifl:property>
        <ifl:property><key>direction</key><value>Receiver</value></ifl:property>
        <ifl:property><key>authenticationMethod</key><value>OAuth2ClientCredentials</value></ifl:property>
        <ifl:property><key>isCSRFEnabled</key><value>true</value></ifl:property>
        <ifl:property><key>privateKeyAlias</key><value>erp_key</value></ifl:property>
      </bpmn2:extensionElements>
    </bpmn2:messageFlow>
    <bpmn2:messageFlow id="MessageFlow_3" name="JMS" sourceRef="EndEvent_1" targetRef="Participant_3">
      <bpmn2:extensionElements>
        <ifl:property><key>ComponentType</key><value>JMS</value></ifl:property>
        <ifl:property><key>Name</key><value>JMS_OUT</value></ifl:property>
        <ifl:property><key>direction</key><value>Receiver</value></ifl:property>
        <ifl:property><key>authenticationMethod</key><value>None</value></ifl:property>
        <ifl:property><key>QueueName_outbound</key><value>orders.q</value></ifl:property>
      </bpmn2:extensionElements>
    </bpmn2:messageFlow>
  </bpmn2:collaboration>
  <bpmn2:process id="Process_1" name="Integration Process">
    <bpmn2:extensionElements>
      <ifl:property><key>transactionTimeout</key><value>30</value></ifl:property>
      <ifl:property><key>transactionalHandling</key><value>Required</value></ifl:property>
    </bpmn2:extensionElements>
    <bpmn2:startEvent id="StartEvent_1" name="Start"/>
    <bpmn2:subProcess id="SubProcess_1" name="Exception Subprocess 1" triggeredByEvent="true">
      <bpmn2:extensionElements>
        <ifl:property><key>activityType</key><value>ErrorEventSubProcessTemplate</value></ifl:property>
      </bpmn2:extensionElements>
      <bpmn2:startEvent id="StartEvent_2" name="Error Start">
        <bpmn2:errorEventDefinition errorRef="OrderError"/>
      </bpmn2:startEvent>
      <bpmn2:endEvent id="EndEvent_2" name="Message End">
        <bpmn2:messageEventDefinition/>
      </bpmn2:endEvent>
    </bpmn2:subProcess>
    <bpmn2:serviceTask id="ServiceTask_1" name="Call ERP">
      <bpmn2:extensionElements>
        <ifl:property><key>activityType</key><value>ExternalCall</value></ifl:property>
        <ifl:property><key>retryInterval</key><value>5</value></ifl:property>
      </bpmn2:extensionElements>
    </bpmn2:serviceTask>
    <bpmn2:scriptTask id="ScriptTask_1" name="Set Headers">
      <bpmn2:script>message.setProperty("orderId", id)</bpmn2:script>
    </bpmn2:scriptTask>
    <bpmn2:scriptTask id="ScriptTask_2" name="Cache Order">
      <bpmn2:extensionElements>
        <ifl:property><key>dataStoreName</key><value>OrderCache</value></ifl:property>
      </bpmn2:extensionElements>
    </bpmn2:scriptTask>
    <bpmn2:callActivity id="CallActivity_1" name="Route" calledElement="Process_2"/>
    <bpmn2:endEvent id="EndEvent_1" name="End"/>
  </bpmn2:process>
</bpmn2:definitions>
"""

NO_COLLABORATION_IFLW = HEADER + """\
  <bpmn2:process id="Process_1" name="Integration Process"/>
</bpmn2:definitions>
"""

MALFORMED_IFLW = HEADER + """\
  <bpmn2:collaboration id="Collaboration_1">
</bpmn2:definitions>
"""


def property_xml(properties: dict) -> str:
    """Render an extensionElements block for a property dict."""
    if not properties:
        return ''
    rows = ''.join(
        f'<ifl:property><key>{k}</key><value>{v}</value></ifl:property>'
        for k, v in properties.items()
    )
    return f'<bpmn2:extensionElements>{rows}</bpmn2:extensionElements>'


def build_iflow_xml(
    collaboration: Optional[dict] = None,
    message_flows: Iterable[dict] = (),
    processes: str = '',
) -> str:
    """Build a definition document from collaboration properties, message-flow property dicts and process XML."""
    flows = ''.join(
        f'<bpmn2:messageFlow id="MessageFlow_{i + 1}">{property_xml(props)}</bpmn2:messageFlow>'
        for i, props in enumerate(message_flows)
    )
    return (
        HEADER
        + f'<bpmn2:collaboration id="Collaboration_1">{property_xml(collaboration or {})}{flows}</bpmn2:collaboration>'
        + processes
        + '</bpmn2:definitions>'
    )


def build_zip_bytes(entries: dict) -> bytes:
    """Build an in-memory ZIP archive from a name -> content mapping."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buffer.getvalue()


# ── Fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def build_iflow_zip():
    """Build an artifact archive holding a definition file plus metadata entries."""
    def _build(document: str = FULL_IFLW, name: str = 'src/main/resources/scenarioflows/integrationflow/Order_Flow.iflw',
               extra: Optional[dict] = None) -> bytes:
        entries = {
            'META-INF/MANIFEST.MF': 'Manifest-Version: 1.0\n',
            'src/main/resources/parameters.prop': 'timeout=30\n',
        }
        if document is not None:
            entries[name] = document
        entries.update(extra or {})
        return build_zip_bytes(entries)
    return _build


@pytest.fixture
def parse_xml():
    """Parse definition text into a ParsedDocument."""
    parser = DocumentParser()

    def _parse(text: str, artifact_id: str = 'Order_Flow'):
        return parser.parse(text, artifact_id)
    return _parse


@pytest.fixture
def full_document(parse_xml):
    return parse_xml(FULL_IFLW)
