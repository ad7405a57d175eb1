"""Domain enums for the iflow parser."""
from enum import Enum


class AdapterDirection(str, Enum):
    """Adapter direction as seen from the integration process."""
    SENDER = "Sender"
    RECEIVER = "Receiver"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str | None) -> 'AdapterDirection | None':
        """Return the member matching value case-insensitively, or None."""
        if not value:
            return None
        lowered = value.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None


class SecurityDirection(str, Enum):
    """Security direction, inverted relative to adapter direction."""
    INBOUND = "Inbound"
    OUTBOUND = "Outbound"

    @classmethod
    def parse(cls, value: str | None) -> 'SecurityDirection | None':
        if not value:
            return None
        lowered = value.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None

    @classmethod
    def for_adapter(cls, direction: AdapterDirection | None) -> 'SecurityDirection | None':
        """Sender adapters are protected inbound, Receiver adapters outbound."""
        if direction is AdapterDirection.SENDER:
            return cls.INBOUND
        if direction is AdapterDirection.RECEIVER:
            return cls.OUTBOUND
        return None


class SecurityMechanismType(str, Enum):
    """Canonical security mechanism types."""
    OAUTH = "OAuth"
    BASIC_AUTHENTICATION = "Basic Authentication"
    CLIENT_CERTIFICATE = "Client Certificate"
    SAML = "SAML"
    JWT = "JWT"
    CSRF_PROTECTION = "CSRF Protection"
    XSRF_PROTECTION = "XSRF Protection"
    CORS = "CORS"
    ROLE_BASED_AUTHORIZATION = "Role-Based Authorization"
    EXCEPTION_HANDLING = "Exception Handling"
    SECURITY_LOGGING = "Security Logging"
    DEBUG_SECURITY = "Debug Security"
    UNKNOWN = "Unknown"


class SecurityBucket(str, Enum):
    """Reporting buckets for canonical security mechanisms."""
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    ENCRYPTION = "encryption"
    LOGGING = "logging"
    PROTECTION = "protection"
    OTHER = "other"


class ErrorClassification(str, Enum):
    """Classification of an error subprocess by its end-event shape."""
    RESPONSE_BASED = "Response-based"
    ESCALATION_BASED = "Escalation-based"
    STANDARD = "Standard"
    BASIC = "Basic"


class DataStoreOperation(str, Enum):
    """Best-effort CRUD classification of a data store reference."""
    GET = "Get"
    PUT = "Put"
    DELETE = "Delete"
    UNKNOWN = "Unknown"


class RecommendationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
