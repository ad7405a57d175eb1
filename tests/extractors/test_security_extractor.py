"""Tests for SecurityExtractor."""

from iflow_parser.domain.models import PropertyPair
from iflow_parser.extractors import SecurityExtractor
from iflow_parser.extractors.security_extractor import collect_security_configuration
from tests.conftest import build_iflow_xml


def _by_name(result):
    return {m.name: m for m in result.value}


class TestMessageFlowSecurity:
    """Tests for the per-adapter pass."""

    def setup_method(self):
        self.extractor = SecurityExtractor()

    def test_sender_basic_authentication(self, parse_xml):
        document = parse_xml(build_iflow_xml(message_flows=[
            {'Name': 'HTTPS_IN', 'direction': 'Sender', 'senderAuthType': 'BasicAuthentication'},
        ]))
        result = self.extractor.extract(document, 'Flow')
        assert len(result.value) == 1
        mechanism = result.value[0]
        assert mechanism.name == 'HTTPS_IN_BasicAuthentication'
        assert mechanism.mechanism_type == 'Basic Authentication'
        assert mechanism.direction == 'Inbound'
        assert mechanism.adapter_name == 'HTTPS_IN'
        assert mechanism.adapter_direction == 'Sender'

    def test_receiver_csrf_only(self, parse_xml):
        document = parse_xml(build_iflow_xml(message_flows=[
            {'Name': 'ODATA_OUT', 'direction': 'Receiver', 'isCSRFEnabled': 'true'},
        ]))
        result = self.extractor.extract(document, 'Flow')
        assert len(result.value) == 1
        assert result.value[0].mechanism_type == 'CSRF Protection'
        assert result.value[0].direction == 'Outbound'
        assert result.value[0].configuration == {'csrfEnabled': True, 'componentType': 'Unknown'}

    def test_receiver_authentication_is_outbound(self, parse_xml):
        document = parse_xml(build_iflow_xml(message_flows=[
            {'Name': 'HTTP_OUT', 'direction': 'Receiver', 'authenticationMethod': 'OAuth2ClientCredentials'},
        ]))
        mechanism = self.extractor.extract(document, 'Flow').value[0]
        assert mechanism.mechanism_type == 'OAuth'
        assert mechanism.direction == 'Outbound'

    def test_sender_ignores_authentication_method(self, parse_xml):
        document = parse_xml(build_iflow_xml(message_flows=[
            {'Name': 'SOAP_IN', 'direction': 'Sender', 'authenticationMethod': 'Basic'},
        ]))
        assert self.extractor.extract(document, 'Flow').value == ()

    def test_none_auth_method_skipped(self, parse_xml):
        document = parse_xml(build_iflow_xml(message_flows=[
            {'Name': 'JMS_OUT', 'direction': 'Receiver', 'authenticationMethod': 'None'},
        ]))
        assert self.extractor.extract(document, 'Flow').value == ()

    def test_unrecognized_auth_method_kept_raw(self, parse_xml):
        document = parse_xml(build_iflow_xml(message_flows=[
            {'Name': 'HTTPS_IN', 'direction': 'Sender', 'senderAuthType': 'RoleBased'},
        ]))
        assert self.extractor.extract(document, 'Flow').value[0].mechanism_type == 'RoleBased'

    def test_full_document_records(self, full_document):
        mechanisms = _by_name(self.extractor.extract(full_document, 'Order_Flow'))

        primary = mechanisms['HTTPS_IN_ClientCertificate']
        assert primary.mechanism_type == 'Client Certificate'
        assert primary.direction == 'Inbound'
        assert primary.configuration == {
            'senderAuthType': 'ClientCertificate',
            'userRole': 'ESBMessaging.send',
            'xsrfProtection': '0',
            'maximumBodySize': '40',
            'componentType': 'HTTPS',
        }
        assert mechanisms['HTTPS_IN_XSRF_Disabled'].configuration['xsrfProtection'] is False
        assert mechanisms['HTTPS_IN_Authorization'].configuration['userRole'] == 'ESBMessaging.send'

        assert mechanisms['ODATA_OUT_OAuth2ClientCredentials'].direction == 'Outbound'
        assert mechanisms['ODATA_OUT_CSRF'].direction == 'Outbound'
        client_cert = mechanisms['ODATA_OUT_ClientCert']
        assert client_cert.mechanism_type == 'Client Certificate'
        assert client_cert.configuration['privateKeyAlias'] == 'erp_key'

        assert not any(name.startswith('JMS_OUT') for name in mechanisms)

    def test_message_flow_records_precede_collaboration_records(self, full_document):
        names = [m.name for m in self.extractor.extract(full_document, 'Order_Flow').value]
        assert names[:3] == ['HTTPS_IN_ClientCertificate', 'HTTPS_IN_XSRF_Disabled', 'HTTPS_IN_Authorization']
        assert names[-4:] == [
            'Order_Flow_ExceptionHandling',
            'Order_Flow_SecurityLogging',
            'Order_Flow_ServerTrace',
            'Order_Flow_CORS',
        ]

    def test_alias_certificate_suppressed_by_primary(self, parse_xml):
        document = parse_xml(build_iflow_xml(message_flows=[{
            'Name': 'SOAP_OUT', 'direction': 'Receiver',
            'authenticationMethod': 'ClientCertificate', 'privateKeyAlias': 'key1',
        }]))
        names = [m.name for m in self.extractor.extract(document, 'Flow').value]
        assert names == ['SOAP_OUT_ClientCertificate']

    def test_odata_alias_key(self, parse_xml):
        document = parse_xml(build_iflow_xml(message_flows=[{
            'Name': 'ODATA_OUT', 'direction': 'Receiver', 'odataCertAuthPrivateKeyAlias': 'key2',
        }]))
        mechanism = self.extractor.extract(document, 'Flow').value[0]
        assert mechanism.name == 'ODATA_OUT_ClientCert'
        assert mechanism.direction == 'Outbound'

    def test_alias_on_sender_ignored(self, parse_xml):
        document = parse_xml(build_iflow_xml(message_flows=[
            {'Name': 'HTTPS_IN', 'direction': 'Sender', 'privateKeyAlias': 'key1'},
        ]))
        assert self.extractor.extract(document, 'Flow').value == ()

    def test_xsrf_enabled_not_recorded(self, parse_xml):
        document = parse_xml(build_iflow_xml(message_flows=[
            {'Name': 'HTTPS_IN', 'direction': 'Sender', 'xsrfProtection': '1'},
        ]))
        assert self.extractor.extract(document, 'Flow').value == ()


class TestCollaborationSecurity:
    """Tests for the collaboration pass."""

    def setup_method(self):
        self.extractor = SecurityExtractor()

    def test_all_collaboration_records_inbound(self, full_document):
        mechanisms = _by_name(self.extractor.extract(full_document, 'Order_Flow'))
        collaboration = [m for name, m in mechanisms.items() if name.startswith('Order_Flow_')]
        assert len(collaboration) == 4
        assert all(m.direction == 'Inbound' for m in collaboration)

    def test_exception_handling_configuration(self, parse_xml):
        document = parse_xml(build_iflow_xml({'returnExceptionToSender': 'true'}))
        mechanism = self.extractor.extract(document, 'Flow').value[0]
        assert mechanism.name == 'Flow_ExceptionHandling'
        assert mechanism.mechanism_type == 'Exception Handling'
        assert mechanism.configuration == {
            'returnExceptionToSender': True,
            'securityImplication': 'May expose internal errors',
        }

    def test_server_trace_is_debug_security(self, parse_xml):
        document = parse_xml(build_iflow_xml({'ServerTrace': 'true'}))
        mechanism = self.extractor.extract(document, 'Flow').value[0]
        assert mechanism.mechanism_type == 'Debug Security'
        assert mechanism.configuration['serverTrace'] is True

    def test_logging(self, parse_xml):
        document = parse_xml(build_iflow_xml({'log': 'Info'}))
        mechanism = self.extractor.extract(document, 'Flow').value[0]
        assert mechanism.configuration == {'logLevel': 'Info', 'auditTrail': True}

    def test_cors_disabled_not_recorded(self, parse_xml):
        document = parse_xml(build_iflow_xml({'corsEnabled': 'false'}))
        assert self.extractor.extract(document, 'Flow').value == ()

    def test_empty_document(self, parse_xml):
        assert self.extractor.extract(parse_xml(build_iflow_xml()), 'Flow').value == ()


class TestCollectSecurityConfiguration:

    def test_filters_by_keyword(self):
        props = [
            PropertyPair('senderAuthType', 'Basic'),
            PropertyPair('urlPath', '/x'),
            PropertyPair('tlsVersion', '1.2'),
        ]
        assert collect_security_configuration(props) == {'senderAuthType': 'Basic', 'tlsVersion': '1.2'}
