import json
import threading
import queue
import subprocess
import sys
import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from . import config

PROTOCOL_VERSION = "2024-11-05"
SERVER_COMMAND = [sys.executable, "-m", "weather_mcp"]


class MCPClientError(Exception):
    pass


@dataclass
class ToolCallResult:
    """Text content of a tool result plus the protocol-level error flag."""
    text: str
    is_error: bool = False


class MCPStdIOClient:
    """JSON-RPC 2.0 client that drives the weather server over stdio.

    Usage:
        with MCPStdIOClient() as client:
            result = client.call_tool("getForecast", {"latitude": 45.5, "longitude": -122.6})
            print(result.text)
    """

    def __init__(self, command: Optional[List[str]] = None, cwd: str = ".", timeout: float = 10.0, log_file: Optional[str] = None, log_level: int = logging.INFO, env: Optional[Dict[str, str]] = None):
        self.command = command or SERVER_COMMAND
        self.cwd = cwd
        self.timeout = timeout
        self.env = env
        self.proc: Optional[subprocess.Popen] = None
        self._id = 0
        self._pending: Dict[int, queue.Queue] = {}
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._reader_thread: Optional[threading.Thread] = None
        self._stderr_thread: Optional[threading.Thread] = None

        self.logger = logging.getLogger("weather_mcp.client")
        if log_file is None and config.LOG_DIR:
            log_file = os.path.join(config.LOG_DIR, "mcp_server.log")
        if log_file:
            self.log_file = os.path.abspath(log_file)
            os.makedirs(os.path.dirname(self.log_file), exist_ok=True)
            # Avoid duplicate handlers if multiple clients are created
            if not any(isinstance(h, logging.FileHandler) and os.path.abspath(h.baseFilename) == self.log_file for h in self.logger.handlers):
                handler = logging.FileHandler(self.log_file)
                handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(message)s'))
                self.logger.addHandler(handler)
            self.logger.setLevel(log_level)
            # Server stderr lines go to the file only
            self.logger.propagate = False
        else:
            self.log_file = None

    def __enter__(self) -> "MCPStdIOClient":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def start(self) -> None:
        """Launch the server process and complete the MCP handshake."""
        if self.proc:
            return

        self.proc = subprocess.Popen(
            self.command,
            cwd=self.cwd,
            env=self.env,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            bufsize=0
        )

        self._reader_thread = threading.Thread(target=self._reader_loop, daemon=True)
        self._reader_thread.start()
        self._stderr_thread = threading.Thread(target=self._stderr_loop, daemon=True)
        self._stderr_thread.start()

        init_params = {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {},
            "clientInfo": {"name": "weather-mcp-client", "version": "1.0.0"}
        }
        try:
            self._send_request("initialize", init_params)
            self._send_notification("notifications/initialized")
        except MCPClientError:
            self.stop()
            raise

    def stop(self) -> None:
        if not self.proc:
            return
        proc, self.proc = self.proc, None
        if proc.stdin:
            proc.stdin.close()
        proc.terminate()
        try:
            proc.wait(timeout=2)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()
        # Drain what the server wrote before exiting
        for thread in (self._reader_thread, self._stderr_thread):
            if thread is not None:
                thread.join(timeout=2)

    def _stderr_loop(self) -> None:
        proc = self.proc
        if not proc or not proc.stderr:
            return
        for line in iter(proc.stderr.readline, b""):
            msg = line.decode("utf-8", errors="ignore").rstrip()
            if msg:
                self.logger.info(f"[MCP server] {msg}")

    def _reader_loop(self) -> None:
        """Read newline-delimited JSON messages from stdout until the pipe closes."""
        proc = self.proc
        if not proc or not proc.stdout:
            return
        for line in iter(proc.stdout.readline, b""):
            text = line.decode('utf-8', errors='ignore').strip()
            if not text:
                continue
            try:
                message = json.loads(text)
            except json.JSONDecodeError:
                self.logger.warning(f"[MCP server output] {text}")
                continue
            if isinstance(message, dict):
                self._handle_message(message)

    def _handle_message(self, message: Dict[str, Any]) -> None:
        """Route a response to its waiting request; notifications are ignored."""
        msg_id = message.get('id')
        if msg_id is None:
            return
        with self._lock:
            q = self._pending.get(msg_id)
        if q:
            q.put(message)
        else:
            self.logger.warning(f"[MCP client] Received response for unknown id: {msg_id}")

    def _next_id(self) -> int:
        with self._lock:
            self._id += 1
            return self._id

    def _ensure_running(self) -> None:
        if not self.proc or self.proc.poll() is not None:
            raise MCPClientError('MCP server is not running')

    def _send_notification(self, method: str, params: Any = None) -> None:
        """Send a JSON-RPC notification (no response expected)."""
        self._ensure_running()
        request: Dict[str, Any] = {"jsonrpc": "2.0", "method": method}
        if params is not None:
            request["params"] = params
        self._write_message(request)

    def _send_request(self, method: str, params: Any = None) -> Any:
        """Send a JSON-RPC request and wait for its response."""
        self._ensure_running()

        req_id = self._next_id()
        request: Dict[str, Any] = {"jsonrpc": "2.0", "method": method, "id": req_id}
        if params is not None:
            request["params"] = params

        q: queue.Queue = queue.Queue()
        with self._lock:
            self._pending[req_id] = q

        try:
            self._write_message(request)
            try:
                msg = q.get(timeout=self.timeout)
            except queue.Empty:
                raise MCPClientError(f'Timeout waiting for response to {method}')

            if 'error' in msg:
                error = msg['error']
                raise MCPClientError(f"{error.get('message', 'Unknown error')}")
            return msg.get('result')
        finally:
            with self._lock:
                self._pending.pop(req_id, None)

    def _write_message(self, message: Dict[str, Any]) -> None:
        """Write a newline-delimited JSON message to stdin."""
        payload = json.dumps(message) + "\n"
        try:
            with self._write_lock:
                self.proc.stdin.write(payload.encode('utf-8'))
                self.proc.stdin.flush()
        except (OSError, ValueError) as e:
            raise MCPClientError(f"Failed to write to MCP server: {e}")

    def list_tools(self) -> List[Dict[str, Any]]:
        """Return the server's tool descriptors (name, description, inputSchema)."""
        result = self._send_request("tools/list", {})
        return list((result or {}).get("tools", []))

    def call_tool(self, tool_name: str, arguments: Dict[str, Any]) -> ToolCallResult:
        """Call a tool and join its text content items."""
        result = self._send_request("tools/call", {"name": tool_name, "arguments": arguments})
        if not isinstance(result, dict):
            raise MCPClientError(f"Malformed tools/call result: {result!r}")
        texts = [item.get("text", "") for item in result.get("content", []) if isinstance(item, dict) and item.get("type") == "text"]
        return ToolCallResult(text="\n".join(texts), is_error=bool(result.get("isError", False)))


def main(argv: Optional[List[str]] = None) -> int:
    """Smoke-check the server: `weather-mcp-call` lists tools, `weather-mcp-call NAME '{json}'` calls one."""
    args = sys.argv[1:] if argv is None else argv
    try:
        with MCPStdIOClient() as client:
            if not args:
                for spec in client.list_tools():
                    print(f"{spec['name']}: {spec.get('description', '')}")
                return 0
            arguments = json.loads(args[1]) if len(args) > 1 else {}
            result = client.call_tool(args[0], arguments)
    except (MCPClientError, json.JSONDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(result.text)
    return 1 if result.is_error else 0


if __name__ == "__main__":
    sys.exit(main())
