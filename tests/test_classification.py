"""Tests for ordered classification rules."""

import pytest

from iflow_parser.domain.classification import (
    ADAPTER_CATEGORY_HINT_RULES,
    ADAPTER_DIRECTION_RULES,
    AUTH_METHOD_RULES,
    DATA_STORE_OPERATION_RULES,
    SECURITY_BUCKET_RULES,
    SECURITY_TYPE_RULES,
    Rule,
    classify,
    contains_any,
)
from iflow_parser.domain.enums import (
    AdapterDirection,
    DataStoreOperation,
    SecurityBucket,
    SecurityDirection,
    SecurityMechanismType,
)


class TestClassify:

    def test_first_matching_rule_wins(self):
        rules = [Rule(contains_any('a'), 'first'), Rule(contains_any('ab'), 'second')]
        assert classify('abc', rules) == 'first'

    def test_default_when_nothing_matches(self):
        assert classify('zzz', [Rule(contains_any('a'), 1)], default=0) == 0

    def test_empty_text_uses_default(self):
        assert classify('', AUTH_METHOD_RULES, default='none') == 'none'
        assert classify(None, AUTH_METHOD_RULES) is None

    def test_contains_any_is_case_insensitive(self):
        assert contains_any('OAuth')('oauth2')


class TestRuleTables:

    @pytest.mark.parametrize('raw,expected', [
        ('BasicAuthentication', 'Basic Authentication'),
        ('ClientCertificate', 'Client Certificate'),
        ('OAuth2ClientCredentials', 'OAuth'),
        ('SAMLBearer', 'SAML'),
    ])
    def test_auth_methods(self, raw, expected):
        assert classify(raw, AUTH_METHOD_RULES, default=raw) == expected

    def test_unrecognized_auth_method_kept(self):
        assert classify('RoleBased', AUTH_METHOD_RULES, default='RoleBased') == 'RoleBased'

    def test_security_type_rules(self):
        assert classify('X509 certificate', SECURITY_TYPE_RULES) is SecurityMechanismType.CLIENT_CERTIFICATE
        assert classify('server trace', SECURITY_TYPE_RULES) is SecurityMechanismType.DEBUG_SECURITY

    def test_adapter_direction_rules(self):
        assert classify('SOAP Sender', ADAPTER_DIRECTION_RULES) is AdapterDirection.SENDER
        assert classify('outbound mail', ADAPTER_DIRECTION_RULES) is AdapterDirection.RECEIVER
        assert classify('SFTP', ADAPTER_DIRECTION_RULES) is None

    def test_https_hint_before_http(self):
        assert classify('HTTPS', ADAPTER_CATEGORY_HINT_RULES) is AdapterDirection.SENDER
        assert classify('HTTP', ADAPTER_CATEGORY_HINT_RULES) is AdapterDirection.RECEIVER
        assert classify('HCIOData', ADAPTER_CATEGORY_HINT_RULES) is AdapterDirection.RECEIVER

    def test_bucket_rules(self):
        assert classify('Basic Authentication', SECURITY_BUCKET_RULES) is SecurityBucket.AUTHENTICATION
        assert classify('Role-Based Authorization', SECURITY_BUCKET_RULES) is SecurityBucket.AUTHORIZATION
        assert classify('CORS', SECURITY_BUCKET_RULES) is SecurityBucket.PROTECTION
        assert classify('Exception Handling', SECURITY_BUCKET_RULES) is None

    def test_data_store_operations(self):
        assert classify('dataStoreGetKey', DATA_STORE_OPERATION_RULES) is DataStoreOperation.GET
        assert classify('storeWriteMode', DATA_STORE_OPERATION_RULES) is DataStoreOperation.PUT
        assert classify('deleteStoreEntry', DATA_STORE_OPERATION_RULES) is DataStoreOperation.DELETE


class TestEnums:

    def test_adapter_direction_parse(self):
        assert AdapterDirection.parse(' sender ') is AdapterDirection.SENDER
        assert AdapterDirection.parse('sideways') is None
        assert AdapterDirection.parse('') is None

    def test_security_direction_for_adapter(self):
        assert SecurityDirection.for_adapter(AdapterDirection.SENDER) is SecurityDirection.INBOUND
        assert SecurityDirection.for_adapter(AdapterDirection.RECEIVER) is SecurityDirection.OUTBOUND
        assert SecurityDirection.for_adapter(AdapterDirection.UNKNOWN) is None
