"""Constants for the irbridge relay."""

# Default configuration paths
DEFAULT_CONFIG_FILE = "irbridge.yaml"

# Server
DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_LISTEN_PORT = 8080

# Backend ports
DEFAULT_IR_PORT = 8080
DEFAULT_ROKU_PORT = 8060
DEFAULT_ZWAY_PORT = 8083
DEFAULT_HASS_PORT = 8123

# IR blaster receiver name (path segment)
DEFAULT_IR_RECEIVER = "Sharp"

# Pacing (milliseconds) and repeat cap
DEFAULT_PAUSE_MS = 375
DEFAULT_MAX_IR_REPEAT = 50

# Timeouts (seconds)
DEFAULT_BACKEND_TIMEOUT = 10.0

# Resources
RESOURCE_POWER = "power"
RESOURCE_CHANNEL = "channel"
RESOURCE_VOLUME = "volume"
RESOURCE_INPUT = "input"
RESOURCE_PLAYBACK = "playback"

# Television IR key codes
TV_KEYS = {
    "power": "KEY_POWER",
    "volume_up": "KEY_VOLUMEUP",
    "volume_down": "KEY_VOLUMEDOWN",
    "channel_up": "KEY_CHANNELUP",
    "channel_down": "KEY_CHANNELDOWN",
    "mute": "KEY_MUTE",
    "input": "KEY_SWITCHVIDEOMODE",
    "live_tv": "KEY_TV",
    "ok": "KEY_OK",
}

# Named television inputs -> number of input-cycle presses
TV_INPUTS = {
    "ANTENNA": 0,
    "HDMI 1": 2,
    "HDMI 2": 3,
    "HDMI 3": 4,
    "HDMI 4": 5,
    "COMPOSITE": 6,
    "COMPONENT": 7,
}

# Roku ECP key names
ROKU_KEYS = {
    "home": "Home",
    "reverse": "Rev",
    "forward": "Fwd",
    "play": "Play",
    "select": "Select",
    "back": "Back",
    "info": "Info",
}

# Voice-assistant playback directive -> Roku key
PLAYBACK_DIRECTIVES = {
    "FastForward": ROKU_KEYS["forward"],
    "Rewind": ROKU_KEYS["reverse"],
    "Pause": ROKU_KEYS["play"],
    "Play": ROKU_KEYS["play"],
    "StartOver": ROKU_KEYS["home"],
}

# Roku app list entries of this type are launchable channels
ROKU_APP_TYPE = "appl"

# Z-Way
ZWAY_API_PREFIX = "/ZAutomation/api/v1"
ZWAY_SESSION_HEADER = "ZWAYSession"
ZWAY_DEVICE_TYPES = {
    "switchBinary": "switch",
    "switchMultilevel": "light",
}

# Home Assistant
HASS_API_PREFIX = "/api"
HASS_DOMAINS = ("switch", "light")
