"""
Security mechanism extraction from integration-flow definitions.

Two independent passes are concatenated: a per-adapter pass over the
message flows, and a pass over the top-level collaboration properties.
Security direction is inverted relative to adapter direction: a Sender
adapter is protected Inbound, a Receiver adapter Outbound.
"""

import logging
from typing import Any, Dict, List

from iflow_parser.document_parser import ParsedDocument
from iflow_parser.domain.classification import AUTH_METHOD_RULES, classify
from iflow_parser.domain.constants import (
    KEY_AUTHENTICATION_METHOD,
    KEY_CORS_ENABLED,
    KEY_CSRF_ENABLED,
    KEY_DIRECTION,
    KEY_LOG_LEVEL,
    KEY_PRIVATE_KEY_ALIASES,
    KEY_RETURN_EXCEPTION,
    KEY_SENDER_AUTH_TYPE,
    KEY_SERVER_TRACE,
    KEY_USER_ROLE,
    KEY_XSRF_PROTECTION,
    NONE_VALUE,
    SECURITY_CONFIG_KEYWORDS,
    UNKNOWN,
)
from iflow_parser.domain.enums import AdapterDirection, SecurityDirection, SecurityMechanismType
from iflow_parser.domain.models import (
    ExtractedSecurityMechanism,
    ExtractionResult,
    MessageFlowFragment,
    PropertyPair,
)
from iflow_parser.domain.properties import (
    collaboration_properties,
    get_first_property,
    get_property,
    matching_properties,
    message_flows,
)
from iflow_parser.extractors.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)


def collect_security_configuration(properties: List[PropertyPair]) -> Dict[str, Any]:
    """Copy the security-relevant properties of a fragment into a dict."""
    return {prop.key: prop.value for prop in matching_properties(properties, SECURITY_CONFIG_KEYWORDS)}


class SecurityExtractor(BaseExtractor):
    """Extracts raw security mechanism candidates."""

    name = 'security'

    def empty_result(self) -> tuple[ExtractedSecurityMechanism, ...]:
        return ()

    def extract(self, document: ParsedDocument, artifact_id: str) -> ExtractionResult[tuple[ExtractedSecurityMechanism, ...]]:
        """
        Extract security mechanism candidates.

        Args:
            document: Parsed definition document
            artifact_id: Artifact identifier; names the collaboration-level records

        Returns:
            ExtractionResult whose value is the message-flow records followed by
            the collaboration records
        """
        mechanisms: List[ExtractedSecurityMechanism] = []
        for index, fragment in enumerate(message_flows(document)):
            mechanisms.extend(self._extract_fragment(fragment, index, artifact_id))
        mechanisms.extend(self._extract_collaboration(document, artifact_id))

        logger.info(
            "Security extraction completed for %s: %d mechanisms (%d inbound, %d outbound), types=%s",
            artifact_id,
            len(mechanisms),
            sum(1 for m in mechanisms if m.direction == SecurityDirection.INBOUND.value),
            sum(1 for m in mechanisms if m.direction == SecurityDirection.OUTBOUND.value),
            sorted({m.mechanism_type for m in mechanisms}),
        )
        return ExtractionResult(value=tuple(mechanisms))

    # ── Message Flow Pass ────────────────────────────────────────────────

    def _extract_fragment(
        self, fragment: MessageFlowFragment, index: int, artifact_id: str
    ) -> List[ExtractedSecurityMechanism]:
        properties = list(fragment.properties)
        raw_direction = get_property(properties, KEY_DIRECTION) or UNKNOWN
        direction = AdapterDirection.parse(raw_direction)
        adapter_name = self._adapter_name(fragment, index)
        component_type = self._component_type(fragment)

        logger.debug(
            "Processing message flow %s for security in %s (direction=%s)",
            fragment.label, artifact_id, raw_direction,
        )

        auth_method = ''
        if direction is AdapterDirection.SENDER:
            auth_method = get_property(properties, KEY_SENDER_AUTH_TYPE)
        elif direction is AdapterDirection.RECEIVER:
            auth_method = get_property(properties, KEY_AUTHENTICATION_METHOD)

        def record(suffix: str, mechanism_type: str, security_direction: SecurityDirection,
                   configuration: Dict[str, Any]) -> ExtractedSecurityMechanism:
            configuration['componentType'] = component_type
            return ExtractedSecurityMechanism(
                name=f"{adapter_name}_{suffix}",
                mechanism_type=mechanism_type,
                direction=security_direction.value,
                configuration=configuration,
                adapter_name=adapter_name,
                adapter_direction=raw_direction,
            )

        mechanisms: List[ExtractedSecurityMechanism] = []

        primary_type = None
        if auth_method and auth_method != NONE_VALUE:
            primary_type = classify(auth_method, AUTH_METHOD_RULES, default=auth_method)
            security_direction = (
                SecurityDirection.INBOUND if direction is AdapterDirection.SENDER else SecurityDirection.OUTBOUND
            )
            mechanisms.append(record(
                auth_method, primary_type, security_direction, collect_security_configuration(properties),
            ))
            logger.debug(
                "Extracted %s mechanism for adapter %s (%s)", primary_type, adapter_name, security_direction.value,
            )

        if get_property(properties, KEY_CSRF_ENABLED) == 'true':
            mechanisms.append(record(
                'CSRF', SecurityMechanismType.CSRF_PROTECTION.value, SecurityDirection.OUTBOUND,
                {'csrfEnabled': True},
            ))

        private_key_alias = get_first_property(properties, KEY_PRIVATE_KEY_ALIASES)
        if private_key_alias and direction is AdapterDirection.RECEIVER:
            # The primary auth method already recorded the certificate
            if primary_type == SecurityMechanismType.CLIENT_CERTIFICATE.value:
                logger.debug(
                    "Skipping alias-derived client certificate for %s: already recorded as %s",
                    adapter_name, auth_method,
                )
            else:
                mechanisms.append(record(
                    'ClientCert', SecurityMechanismType.CLIENT_CERTIFICATE.value, SecurityDirection.OUTBOUND,
                    {'privateKeyAlias': private_key_alias, 'certificateAuthentication': True},
                ))

        if direction is AdapterDirection.SENDER:
            if get_property(properties, KEY_XSRF_PROTECTION) == '0':
                mechanisms.append(record(
                    'XSRF_Disabled', SecurityMechanismType.XSRF_PROTECTION.value, SecurityDirection.INBOUND,
                    {'xsrfProtection': False},
                ))
            user_role = get_property(properties, KEY_USER_ROLE)
            if user_role:
                mechanisms.append(record(
                    'Authorization', SecurityMechanismType.ROLE_BASED_AUTHORIZATION.value, SecurityDirection.INBOUND,
                    {'userRole': user_role},
                ))

        return mechanisms

    # ── Collaboration Pass ───────────────────────────────────────────────

    def _extract_collaboration(self, document: ParsedDocument, artifact_id: str) -> List[ExtractedSecurityMechanism]:
        mechanisms: List[ExtractedSecurityMechanism] = []

        def record(suffix: str, mechanism_type: SecurityMechanismType, configuration: Dict[str, Any]):
            mechanisms.append(ExtractedSecurityMechanism(
                name=f"{artifact_id}_{suffix}",
                mechanism_type=mechanism_type.value,
                direction=SecurityDirection.INBOUND.value,
                configuration=configuration,
            ))

        for prop in collaboration_properties(document):
            key, value = prop.key, prop.value
            if key == KEY_CORS_ENABLED and value == 'true':
                record('CORS', SecurityMechanismType.CORS, {'corsEnabled': True})
            elif key == KEY_RETURN_EXCEPTION:
                record('ExceptionHandling', SecurityMechanismType.EXCEPTION_HANDLING, {
                    'returnExceptionToSender': value == 'true',
                    'securityImplication': (
                        'Prevents information disclosure' if value == 'false' else 'May expose internal errors'
                    ),
                })
            elif key == KEY_LOG_LEVEL:
                record('SecurityLogging', SecurityMechanismType.SECURITY_LOGGING, {
                    'logLevel': value,
                    'auditTrail': True,
                })
            elif key == KEY_SERVER_TRACE:
                record('ServerTrace', SecurityMechanismType.DEBUG_SECURITY, {
                    'serverTrace': value == 'true',
                    'securityRisk': (
                        'May expose sensitive data in traces' if value == 'true' else 'Safe for production'
                    ),
                })

        return mechanisms
