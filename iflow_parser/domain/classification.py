"""Ordered classification rules for free-form vendor strings.

Each table is an ordered list of ``Rule`` objects evaluated first to last;
the first matching rule decides and a terminal default covers the rest.
Matching is case-insensitive substring matching unless stated otherwise.

Example:
    >>> classify('OAuth2ClientCredentials', AUTH_METHOD_RULES)
    'OAuth'
    >>> classify('Anonymous', AUTH_METHOD_RULES, default='Anonymous')
    'Anonymous'
"""

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

from iflow_parser.domain.enums import (
    AdapterDirection,
    DataStoreOperation,
    SecurityBucket,
    SecurityDirection,
    SecurityMechanismType,
)

V = TypeVar('V')


def contains_any(*keywords: str) -> Callable[[str], bool]:
    """Build a predicate testing whether text mentions any keyword."""
    lowered = tuple(k.lower() for k in keywords)

    def predicate(text: str) -> bool:
        text = (text or '').lower()
        return any(k in text for k in lowered)

    return predicate


@dataclass(frozen=True)
class Rule(Generic[V]):
    """A (predicate, canonical value) pair."""

    predicate: Callable[[str], bool]
    value: V

    def matches(self, text: str) -> bool:
        return self.predicate(text)


def classify(text: str | None, rules: Iterable[Rule[V]], default: V | None = None) -> V | None:
    """Return the value of the first rule matching text, else default."""
    if not text:
        return default
    for rule in rules:
        if rule.matches(text):
            return rule.value
    return default


# ── Security ────────────────────────────────────────────────────────────

# Primary auth-method strings found on message flows
AUTH_METHOD_RULES: list[Rule[str]] = [
    Rule(contains_any('ClientCertificate', 'Client Certificate'), SecurityMechanismType.CLIENT_CERTIFICATE.value),
    Rule(contains_any('Basic'), SecurityMechanismType.BASIC_AUTHENTICATION.value),
    Rule(contains_any('OAuth'), SecurityMechanismType.OAUTH.value),
    Rule(contains_any('SAML'), SecurityMechanismType.SAML.value),
    Rule(contains_any('JWT'), SecurityMechanismType.JWT.value),
]

# Exact canonical mapping, consulted before the substring fallback
SECURITY_TYPE_MAPPING: dict[str, SecurityMechanismType] = {
    'ClientCertificate': SecurityMechanismType.CLIENT_CERTIFICATE,
    'Client Certificate': SecurityMechanismType.CLIENT_CERTIFICATE,
    'BasicAuthentication': SecurityMechanismType.BASIC_AUTHENTICATION,
    'Basic Authentication': SecurityMechanismType.BASIC_AUTHENTICATION,
    'OAuth': SecurityMechanismType.OAUTH,
    'OAuth2': SecurityMechanismType.OAUTH,
    'SAML': SecurityMechanismType.SAML,
    'JWT': SecurityMechanismType.JWT,
    'None': SecurityMechanismType.UNKNOWN,
    'CSRF Protection': SecurityMechanismType.CSRF_PROTECTION,
    'XSRF Protection': SecurityMechanismType.XSRF_PROTECTION,
    'CORS': SecurityMechanismType.CORS,
    'Role-Based Authorization': SecurityMechanismType.ROLE_BASED_AUTHORIZATION,
    'Exception Handling': SecurityMechanismType.EXCEPTION_HANDLING,
    'Security Logging': SecurityMechanismType.SECURITY_LOGGING,
    'Debug Security': SecurityMechanismType.DEBUG_SECURITY,
}

SECURITY_TYPE_RULES: list[Rule[SecurityMechanismType]] = [
    Rule(contains_any('clientcertificate', 'client certificate', 'certificate'), SecurityMechanismType.CLIENT_CERTIFICATE),
    Rule(contains_any('basic'), SecurityMechanismType.BASIC_AUTHENTICATION),
    Rule(contains_any('oauth'), SecurityMechanismType.OAUTH),
    Rule(contains_any('saml'), SecurityMechanismType.SAML),
    Rule(contains_any('jwt'), SecurityMechanismType.JWT),
    Rule(contains_any('csrf'), SecurityMechanismType.CSRF_PROTECTION),
    Rule(contains_any('xsrf'), SecurityMechanismType.XSRF_PROTECTION),
    Rule(contains_any('cors'), SecurityMechanismType.CORS),
    Rule(contains_any('authorization', 'role'), SecurityMechanismType.ROLE_BASED_AUTHORIZATION),
    Rule(contains_any('exception'), SecurityMechanismType.EXCEPTION_HANDLING),
    Rule(contains_any('logging', 'audit'), SecurityMechanismType.SECURITY_LOGGING),
    Rule(contains_any('debug', 'trace'), SecurityMechanismType.DEBUG_SECURITY),
]

SECURITY_DIRECTION_RULES: list[Rule[SecurityDirection]] = [
    Rule(contains_any('sender', 'authorization', 'cors', 'exception handling', 'logging'), SecurityDirection.INBOUND),
    Rule(contains_any('receiver', 'csrf'), SecurityDirection.OUTBOUND),
]

SECURITY_BUCKET_RULES: list[Rule[SecurityBucket]] = [
    Rule(contains_any('authentication', 'certificate', 'oauth', 'saml', 'jwt'), SecurityBucket.AUTHENTICATION),
    Rule(contains_any('authorization', 'role'), SecurityBucket.AUTHORIZATION),
    Rule(contains_any('encryption', 'ssl', 'tls'), SecurityBucket.ENCRYPTION),
    Rule(contains_any('logging', 'audit'), SecurityBucket.LOGGING),
    Rule(contains_any('csrf', 'xsrf', 'cors'), SecurityBucket.PROTECTION),
]


# ── Adapters ────────────────────────────────────────────────────────────

ADAPTER_DIRECTION_RULES: list[Rule[AdapterDirection]] = [
    Rule(contains_any('sender', 'inbound'), AdapterDirection.SENDER),
    Rule(contains_any('receiver', 'outbound'), AdapterDirection.RECEIVER),
]

# Component-type hints; https must be tested before http
ADAPTER_CATEGORY_HINT_RULES: list[Rule[AdapterDirection]] = [
    Rule(contains_any('sender', 'https'), AdapterDirection.SENDER),
    Rule(contains_any('receiver', 'http', 'odata', 'process'), AdapterDirection.RECEIVER),
]

ADAPTER_TYPE_DISPLAY_NAMES: dict[str, str] = {
    'HTTPS': 'HTTPS Sender',
    'HTTP': 'HTTP Receiver',
    'HCIOData': 'OData Receiver',
    'ProcessDirect': 'Process Direct',
    'JMS': 'JMS Adapter',
    'SFTP': 'SFTP Adapter',
    'Mail': 'Mail Adapter',
    'FTP': 'FTP Adapter',
    'SOAP': 'SOAP Adapter',
    'REST': 'REST Adapter',
}


# ── Persistence ─────────────────────────────────────────────────────────

DATA_STORE_OPERATION_RULES: list[Rule[DataStoreOperation]] = [
    Rule(contains_any('get', 'select'), DataStoreOperation.GET),
    Rule(contains_any('put', 'write'), DataStoreOperation.PUT),
    Rule(contains_any('delete'), DataStoreOperation.DELETE),
]
