import os

NWS_API_BASE = os.environ.get("NWS_API_BASE", "https://api.weather.gov").rstrip("/")
USER_AGENT = os.environ.get("NWS_USER_AGENT", "weather-app/1.0")
REQUEST_TIMEOUT = float(os.environ.get("NWS_TIMEOUT", "30.0"))

# File logging is enabled only when LOG_DIR is set; stderr logging is always on.
LOG_DIR = os.environ.get("LOG_DIR")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

SERVER_NAME = "Weather"
SERVER_INSTRUCTIONS = "A simple weather MCP server"

__all__ = [
    "NWS_API_BASE",
    "USER_AGENT",
    "REQUEST_TIMEOUT",
    "LOG_DIR",
    "LOG_LEVEL",
    "SERVER_NAME",
    "SERVER_INSTRUCTIONS",
]
