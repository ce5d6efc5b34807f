"""Constants and default values for the BIG-IP IPAM Operator."""

# IPAM CRD identifiers
IPAM_API_GROUP = "ipam.nexinto.com"
IPAM_API_VERSION = "v1"
IPAM_PLURAL = "ipaddresses"
IPAM_KIND = "IpAddress"

# Owner of virtual-server records and address requests
SERVICE_API_VERSION = "v1"
SERVICE_KIND = "Service"

# Virtual-server records
RECORD_PREFIX = "bigip"
RECORD_SEPARATOR = "-"
LABEL_F5_TYPE = "f5type"
LABEL_F5_TYPE_VIRTUAL_SERVER = "virtual-server"
VIRTUAL_SERVER_SELECTOR = f"{LABEL_F5_TYPE}={LABEL_F5_TYPE_VIRTUAL_SERVER}"
DATA_SCHEMA_KEY = "schema"
DATA_CONFIG_KEY = "data"
VIRTUAL_SERVER_SCHEMA = "f5schemadb://bigip-virtual-server_v0.1.3.json"

# Virtual-server configuration
BALANCE_ROUND_ROBIN = "round-robin"
HTTP_PORT = 80
HTTPS_PORT = 443
SSL_PROFILE_SEPARATOR = ","

# Allocation provider written into the request marker
VIP_PROVIDER_BIGIP = "bigip"

PROTOCOL_UDP = "UDP"
PROTOCOL_TCP = "TCP"

# Events
EVENT_COMPONENT = "bigip-ipam-operator"
EVENT_REASON_READY = "VirtualServerReady"

# Default values
DEFAULT_PARTITION = "kubernetes"
DEFAULT_CONTROLLER_TAG = "kubernetes"
DEFAULT_LOG_LEVEL = "info"
DEFAULT_WORKERS = 4
DEFAULT_RETRY_BASE_DELAY = 1.0
DEFAULT_RETRY_MAX_DELAY = 300.0
