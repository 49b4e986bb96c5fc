"""Weather MCP server package with lazy server imports to avoid runpy warnings.

`weather_mcp.server` is not imported at package import time, so starting the
server with `python -m weather_mcp.server` from another process does not emit
a `RuntimeWarning`.
"""

from importlib import import_module
from .client import MCPStdIOClient, MCPClientError, ToolCallResult

__all__ = [
    "MCPStdIOClient",
    "MCPClientError",
    "ToolCallResult",
    "get_mcp",
    "get_alerts",
    "get_forecast",
    "run_server",
    "main",
]

# Attributes provided by the server module. We lazily import `weather_mcp.server`
# only when one of these attributes is accessed.
_server_attrs = {
    "get_mcp",
    "get_alerts",
    "get_forecast",
    "run_server",
    "main",
}


def _load_server():
    return import_module(".server", __package__)


def __getattr__(name: str):
    if name in _server_attrs:
        return getattr(_load_server(), name)
    raise AttributeError(f"module {__name__} has no attribute {name}")


def __dir__():
    return sorted(list(globals().keys()) + list(_server_attrs))
