"""Shared constants, vendor property keys, and heuristic keyword tables.

Centralizes the names and limits that are shared across the archive reader,
the extractors, and the normalization processors.
"""

# ── Archive & Document ──────────────────────────────────────────────────

DEFINITION_FILE_EXTENSION = '.iflw'

BPMN_NS = 'http://www.omg.org/spec/BPMN/20100524/MODEL'

# Element local names used by the extractors
DEFINITIONS = 'definitions'
COLLABORATION = 'collaboration'
PROCESS = 'process'
MESSAGE_FLOW = 'messageFlow'
EXTENSION_ELEMENTS = 'extensionElements'
PROPERTY = 'property'
PROPERTY_KEY = 'key'
PROPERTY_VALUE = 'value'
SUB_PROCESS = 'subProcess'
START_EVENT = 'startEvent'
END_EVENT = 'endEvent'
SERVICE_TASK = 'serviceTask'
SCRIPT_TASK = 'scriptTask'
CALL_ACTIVITY = 'callActivity'
SCRIPT = 'script'
ERROR_EVENT_DEFINITION = 'errorEventDefinition'
MESSAGE_EVENT_DEFINITION = 'messageEventDefinition'
ESCALATION_EVENT_DEFINITION = 'escalationEventDefinition'

# ── Vendor Property Keys ────────────────────────────────────────────────

KEY_NAME = 'Name'
KEY_COMPONENT_TYPE = 'ComponentType'
KEY_DIRECTION = 'direction'
KEY_CMD_VARIANT_URI = 'cmdVariantUri'
KEY_SENDER_AUTH_TYPE = 'senderAuthType'
KEY_AUTHENTICATION_METHOD = 'authenticationMethod'
KEY_CSRF_ENABLED = 'isCSRFEnabled'
KEY_PRIVATE_KEY_ALIASES = ('privateKeyAlias', 'odataCertAuthPrivateKeyAlias')
KEY_XSRF_PROTECTION = 'xsrfProtection'
KEY_USER_ROLE = 'userRole'
KEY_CORS_ENABLED = 'corsEnabled'
KEY_RETURN_EXCEPTION = 'returnExceptionToSender'
KEY_LOG_LEVEL = 'log'
KEY_SERVER_TRACE = 'ServerTrace'
KEY_ACTIVITY_TYPE = 'activityType'
KEY_TRANSACTION_TIMEOUT = 'transactionTimeout'
KEY_TRANSACTIONAL_HANDLING = 'transactionalHandling'
KEY_ISOLATION_LEVEL = 'isolationLevel'
KEY_PROCESS_TYPE = 'processType'
KEY_MESSAGE_PERSISTENCE = ('messagePersistenceEnabled', 'persist')

UNKNOWN = 'Unknown'
NONE_VALUE = 'None'
DIRECT_CALL_PROCESS_TYPE = 'ProcessDirect'
ROLLBACK_HANDLING = 'Required'

# ── Field Limits ────────────────────────────────────────────────────────

MAX_NAME_LENGTH = 255
MAX_TYPE_LENGTH = 100
MAX_DIRECTION_LENGTH = 50
MAX_ID_LENGTH = 100
MAX_VALUE_LENGTH = 500
MAX_SETTING_LENGTH = 50
MAX_FILENAME_LENGTH = 120

# ── Heuristic Keywords ──────────────────────────────────────────────────
#
# All keyword matching is case-insensitive substring matching against
# property keys, component types, or activity types.

SECURITY_CONFIG_KEYWORDS = (
    'auth', 'certificate', 'credential', 'security', 'ssl', 'tls',
    'userrole', 'clientcertificates', 'xsrf', 'maximumbodysize',
)
TRY_CATCH_KEYWORDS = ('error', 'exception', 'retry')
DATA_STORE_KEYWORDS = ('datastore', 'data_store', 'store')
VARIABLE_KEYWORDS = ('variable', 'header', 'property')
VARIABLE_SCRIPT_CALLS = ('setProperty', 'getProperty', 'setHeader', 'getHeader')
OPERATION_KEYWORDS = ('operation', 'action')
JMS_COMPONENT_KEYWORDS = ('jms', 'queue', 'topic')
JMS_PROPERTY_KEYWORDS = ('jms', 'queue', 'topic')
PERSISTENCE_PROPERTY_KEYWORDS = ('persist', 'durable', 'reliable')
RELIABLE_COMPONENT_KEYWORDS = ('jms', 'queue', 'reliable')
DATA_STORE_COMPONENT_KEYWORDS = ('datastore', 'store')
DATA_STORE_ACTIVITY_KEYWORDS = ('DataStore', 'Store')
VARIABLE_ACTIVITY_KEYWORDS = ('ContentModifier', 'Variable')
EXTERNAL_CALL_ACTIVITY_KEYWORDS = ('external', 'request reply', 'request-reply', 'requestreply')
