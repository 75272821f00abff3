"""Internal constants shared across the library."""

API_BASE = "https://api.tessie.com"
STREAMING_BASE = "wss://streaming.tessie.com"

# Outbound HTTP bounds (seconds).
CONNECT_TIMEOUT = 10.0
REQUEST_TIMEOUT = 30.0

# Data ID tagging frames forwarded by the host's WebSocket client.
TELEMETRY_RX_DATA_ID = "{018EF6B5-AB94-40C6-AA53-46943E824ACF}"

# ------------------------------------------------------------------
# Identifiers
# ------------------------------------------------------------------

IDENTIFIER_MAX_LENGTH = 64
IDENTIFIER_HASH_LENGTH = 10
CATEGORY_HASH_LENGTH = 8

CATEGORY_PREFIX = "CAT_"
LINK_PREFIX = "LNK_"
LINK_SET_PREFIX = "OVL_"
LINK_ROOT_PREFIX = "OVR_"
META_PREFIX = "META_"

MANAGED_PREFIXES: tuple[str, ...] = (
    CATEGORY_PREFIX,
    LINK_PREFIX,
    LINK_SET_PREFIX,
    LINK_ROOT_PREFIX,
    META_PREFIX,
)

LINK_ROOT_META_IDENT = "META_link_root"

# ------------------------------------------------------------------
# Signal paths
# ------------------------------------------------------------------

REST_PREFIX = "rest"
TELEMETRY_PREFIX = "telemetry"
ACTION_PREFIX = "action"

MAX_FLATTEN_DEPTH = 64

# ------------------------------------------------------------------
# Command parameter ranges
# ------------------------------------------------------------------

CHARGE_LIMIT_MIN = 0
CHARGE_LIMIT_MAX = 100
CHARGING_AMPS_MIN = 1
CHARGING_AMPS_MAX = 48


def is_managed_identifier(identifier: str) -> bool:
    """Return ``True`` when *identifier* lives in the engine's reserved namespace."""
    return identifier.startswith(MANAGED_PREFIXES)
