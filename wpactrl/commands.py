"""Command and event names understood by wpa_supplicant.

Event names keep the daemon's exact text, including the trailing space
it sends after most of them, because subscription filters match the
whole event message.
"""

# --- Commands ---

PING = "PING"
STATUS = "STATUS"
LEVEL = "LEVEL"
INTERFACES = "INTERFACES"
SCAN = "SCAN"
SCAN_RESULTS = "SCAN_RESULTS"
BSS = "BSS"
SIGNAL_POLL = "SIGNAL_POLL"
LIST_NETWORKS = "LIST_NETWORKS"
ADD_NETWORK = "ADD_NETWORK"
REMOVE_NETWORK = "REMOVE_NETWORK"
SET_NETWORK = "SET_NETWORK"
GET_NETWORK = "GET_NETWORK"
SELECT_NETWORK = "SELECT_NETWORK"
ENABLE_NETWORK = "ENABLE_NETWORK"
DISABLE_NETWORK = "DISABLE_NETWORK"
SAVE_CONFIG = "SAVE_CONFIG"
RECONFIGURE = "RECONFIGURE"
DISCONNECT = "DISCONNECT"
RECONNECT = "RECONNECT"
REASSOCIATE = "REASSOCIATE"
TERMINATE = "TERMINATE"

ALL_COMMANDS = (
    PING, STATUS, LEVEL, INTERFACES, SCAN, SCAN_RESULTS, BSS, SIGNAL_POLL,
    LIST_NETWORKS, ADD_NETWORK, REMOVE_NETWORK, SET_NETWORK, GET_NETWORK,
    SELECT_NETWORK, ENABLE_NETWORK, DISABLE_NETWORK, SAVE_CONFIG,
    RECONFIGURE, DISCONNECT, RECONNECT, REASSOCIATE, TERMINATE,
)

# --- Connection events ---

EVENT_CONNECTED = "CTRL-EVENT-CONNECTED "
EVENT_DISCONNECTED = "CTRL-EVENT-DISCONNECTED "
EVENT_ASSOC_REJECT = "CTRL-EVENT-ASSOC-REJECT "
EVENT_AUTH_REJECT = "CTRL-EVENT-AUTH-REJECT "
EVENT_TERMINATING = "CTRL-EVENT-TERMINATING "
EVENT_PASSWORD_CHANGED = "CTRL-EVENT-PASSWORD-CHANGED "
EVENT_STATE_CHANGE = "CTRL-EVENT-STATE-CHANGE "
EVENT_TEMP_DISABLED = "CTRL-EVENT-SSID-TEMP-DISABLED "
EVENT_REENABLED = "CTRL-EVENT-SSID-REENABLED "
EVENT_NETWORK_NOT_FOUND = "CTRL-EVENT-NETWORK-NOT-FOUND "
EVENT_SIGNAL_CHANGE = "CTRL-EVENT-SIGNAL-CHANGE "
EVENT_BEACON_LOSS = "CTRL-EVENT-BEACON-LOSS "
EVENT_REGDOM_CHANGE = "CTRL-EVENT-REGDOM-CHANGE "
EVENT_CHANNEL_SWITCH = "CTRL-EVENT-CHANNEL-SWITCH "
EVENT_FREQ_CONFLICT = "CTRL-EVENT-FREQ-CONFLICT "
EVENT_AVOID_FREQ = "CTRL-EVENT-AVOID-FREQ "

# --- EAP events ---

EVENT_EAP_NOTIFICATION = "CTRL-EVENT-EAP-NOTIFICATION "
EVENT_EAP_STARTED = "CTRL-EVENT-EAP-STARTED "
EVENT_EAP_METHOD = "CTRL-EVENT-EAP-METHOD "
EVENT_EAP_STATUS = "CTRL-EVENT-EAP-STATUS "
EVENT_EAP_SUCCESS = "CTRL-EVENT-EAP-SUCCESS "
EVENT_EAP_FAILURE = "CTRL-EVENT-EAP-FAILURE "
EVENT_EAP_TIMEOUT_FAILURE = "CTRL-EVENT-EAP-TIMEOUT-FAILURE "

# --- Scan and BSS events ---

EVENT_SCAN_STARTED = "CTRL-EVENT-SCAN-STARTED "
EVENT_SCAN_RESULTS = "CTRL-EVENT-SCAN-RESULTS "
EVENT_SCAN_FAILED = "CTRL-EVENT-SCAN-FAILED "
EVENT_BSS_ADDED = "CTRL-EVENT-BSS-ADDED "
EVENT_BSS_REMOVED = "CTRL-EVENT-BSS-REMOVED "

# --- WPS events ---

WPS_EVENT_OVERLAP = "WPS-OVERLAP-DETECTED "
WPS_EVENT_AP_AVAILABLE_PBC = "WPS-AP-AVAILABLE-PBC "
WPS_EVENT_AP_AVAILABLE_AUTH = "WPS-AP-AVAILABLE-AUTH "
WPS_EVENT_AP_AVAILABLE_PIN = "WPS-AP-AVAILABLE-PIN "
WPS_EVENT_AP_AVAILABLE = "WPS-AP-AVAILABLE "
WPS_EVENT_CRED_RECEIVED = "WPS-CRED-RECEIVED "
WPS_EVENT_FAIL = "WPS-FAIL "
WPS_EVENT_SUCCESS = "WPS-SUCCESS "
WPS_EVENT_TIMEOUT = "WPS-TIMEOUT "

# --- AP mode events ---

AP_STA_CONNECTED = "AP-STA-CONNECTED "
AP_STA_DISCONNECTED = "AP-STA-DISCONNECTED "
AP_EVENT_ENABLED = "AP-ENABLED "
AP_EVENT_DISABLED = "AP-DISABLED "
INTERFACE_ENABLED = "INTERFACE-ENABLED "
INTERFACE_DISABLED = "INTERFACE-DISABLED "
