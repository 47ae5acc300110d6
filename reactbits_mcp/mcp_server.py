"""MCP-style tool server exposing the component store over stdio."""

from __future__ import annotations

import json
import logging
import signal
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TextIO

from mcp.types import INVALID_REQUEST, PARSE_ERROR, Tool

from . import __version__
from .config import CATEGORIES
from .errors import INTERNAL_ERROR, METHOD_NOT_FOUND, QueryError
from .query import ComponentQueryService
from .store import ComponentStore

logger = logging.getLogger("reactbits_mcp.mcp")

SERVER_NAME = "reactbits-mcp-server"
PROTOCOL_VERSION = "2024-11-05"

_CATEGORY_PROPERTY = {
    "type": "string",
    "enum": list(CATEGORIES),
}

TOOLS: List[Tool] = [
    Tool(
        name="searchComponents",
        description="Search for React components by keyword or description",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query for finding components by name, description, or category",
                },
                "category": {
                    **_CATEGORY_PROPERTY,
                    "description": "Optional filter by category: 'components', 'backgrounds', or 'animations'",
                },
            },
            "required": ["query"],
        },
    ),
    Tool(
        name="getComponent",
        description="Get complete details about a specific component by name",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Exact name of the component to retrieve",
                },
            },
            "required": ["name"],
        },
    ),
    Tool(
        name="listCategories",
        description="List all available component categories",
        inputSchema={"type": "object", "properties": {}, "required": []},
    ),
    Tool(
        name="listComponents",
        description="List available components, optionally filtered by category",
        inputSchema={
            "type": "object",
            "properties": {
                "category": {**_CATEGORY_PROPERTY, "description": "Optional category filter"},
            },
            "required": [],
        },
    ),
]


def error_response(code: int, message: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"error": error}


def text_result(text: str) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


class ToolServer:
    """Dispatches JSON-RPC method names to query operations."""

    def __init__(self, service: ComponentQueryService) -> None:
        self.service = service
        self._tools: Dict[str, Callable[[Dict[str, Any]], str]] = {
            "searchComponents": lambda args: service.search(args.get("query"), args.get("category")),
            "getComponent": lambda args: service.get_component(args.get("name")),
            "listCategories": lambda args: service.list_categories(),
            "listComponents": lambda args: service.list_components(args.get("category")),
        }

    def initialize(self) -> Dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    def list_tools(self) -> Dict[str, Any]:
        return {
            "tools": [tool.model_dump(by_alias=True, exclude_none=True) for tool in TOOLS]
        }

    def call_tool(self, name: Optional[str], arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        handler = self._tools.get(name or "")
        if handler is None:
            return error_response(METHOD_NOT_FOUND, f"Tool not found: {name}")
        try:
            return text_result(handler(arguments or {}))
        except QueryError as exc:
            logger.info("%s failed: %s", name, exc.message)
            return {"error": exc.to_error()}
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("%s failed", name)
            return error_response(INTERNAL_ERROR, "Internal error", {"details": str(exc)})

    def handle(self, method: Optional[str], params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Return a result object or an ``{"error": ...}`` object; never raises."""
        try:
            params = params or {}
            if method == "initialize":
                return self.initialize()
            if method == "tools/list":
                return self.list_tools()
            if method == "tools/call":
                return self.call_tool(params.get("name"), params.get("arguments"))
            if method == "resources/list":
                return {"resources": []}
            if method == "prompts/list":
                return {"prompts": []}
            return {}
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Error handling %s", method)
            return error_response(INTERNAL_ERROR, "Internal error", {"details": str(exc)})

    def handle_message(self, message: Any) -> Optional[Dict[str, Any]]:
        """Wrap :meth:`handle` in a JSON-RPC envelope; notifications get no reply."""
        if not isinstance(message, dict):
            return {"jsonrpc": "2.0", "id": None, "error": {"code": INVALID_REQUEST, "message": "Invalid request"}}
        msg_id = message.get("id")
        method = message.get("method")
        logger.debug("REQUEST: %s [%s]", method, msg_id)
        params = message.get("params")
        outcome = self.handle(method, params if isinstance(params, dict) else {})
        if msg_id is None:
            return None
        if "error" in outcome:
            return {"jsonrpc": "2.0", "id": msg_id, "error": outcome["error"]}
        return {"jsonrpc": "2.0", "id": msg_id, "result": outcome}

    def serve(self, stdin: TextIO, stdout: TextIO) -> None:
        """Answer one request per input line until EOF."""
        for line in stdin:
            line = line.strip()
            if not line:
                continue
            try:
                message = json.loads(line)
            except json.JSONDecodeError as exc:
                logger.warning("Discarding unparseable message: %s", exc)
                reply: Optional[Dict[str, Any]] = {
                    "jsonrpc": "2.0",
                    "id": None,
                    "error": {"code": PARSE_ERROR, "message": f"Parse error: {exc}"},
                }
            else:
                reply = self.handle_message(message)
            if reply is not None:
                stdout.write(json.dumps(reply) + "\n")
                stdout.flush()


def install_signal_handlers(store: ComponentStore) -> None:
    """SIGINT closes the store and exits; SIGTERM is logged and ignored."""

    def _on_sigint(signum, frame) -> None:
        logger.info("Shutting down server...")
        store.close()
        sys.exit(0)

    def _on_sigterm(signum, frame) -> None:
        logger.info("SIGTERM received; continuing to serve")

    signal.signal(signal.SIGINT, _on_sigint)
    signal.signal(signal.SIGTERM, _on_sigterm)


def run_server(db_path: Path, base_dir: Path) -> None:
    """Open the store read-only and serve stdio until EOF or SIGINT."""
    store = ComponentStore.open(db_path, readonly=True)
    install_signal_handlers(store)
    server = ToolServer(ComponentQueryService(store, base_dir=base_dir))
    logger.info("Starting %s with stdio transport (db: %s)", SERVER_NAME, db_path)
    try:
        server.serve(sys.stdin, sys.stdout)
    finally:
        store.close()
