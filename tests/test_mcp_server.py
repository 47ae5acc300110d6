"""Tests for JSON-RPC dispatch in reactbits_mcp/mcp_server.py."""

import io
import json
import signal

import pytest

from reactbits_mcp.errors import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, NOT_FOUND
from reactbits_mcp.mcp_server import (
    PROTOCOL_VERSION,
    SERVER_NAME,
    ToolServer,
    install_signal_handlers,
)


@pytest.fixture
def server(service):
    return ToolServer(service)


def call(server, name, arguments=None):
    return server.handle("tools/call", {"name": name, "arguments": arguments or {}})


class TestHandle:
    def test_initialize(self, server):
        result = server.handle("initialize")
        assert result["protocolVersion"] == PROTOCOL_VERSION
        assert result["serverInfo"]["name"] == SERVER_NAME
        assert "tools" in result["capabilities"]

    def test_tools_list(self, server):
        tools = server.handle("tools/list")["tools"]
        assert [tool["name"] for tool in tools] == [
            "searchComponents",
            "getComponent",
            "listCategories",
            "listComponents",
        ]
        search = tools[0]
        assert search["inputSchema"]["required"] == ["query"]
        assert search["inputSchema"]["properties"]["category"]["enum"] == [
            "components",
            "backgrounds",
            "animations",
        ]

    def test_empty_lists(self, server):
        assert server.handle("resources/list") == {"resources": []}
        assert server.handle("prompts/list") == {"prompts": []}

    def test_unknown_method_returns_empty_result(self, server):
        assert server.handle("does/not/exist") == {}

    def test_search_tool(self, server):
        result = call(server, "searchComponents", {"query": "count"})
        content = result["content"][0]
        assert content["type"] == "text"
        assert "**Counter**" in content["text"]

    def test_get_component_tool(self, server):
        text = call(server, "getComponent", {"name": "counter"})["content"][0]["text"]
        assert text.startswith("# Counter")

    def test_list_tools(self, server):
        assert call(server, "listCategories")["content"][0]["text"].startswith(
            "Available categories:"
        )
        text = call(server, "listComponents", {"category": "backgrounds"})["content"][0]["text"]
        assert text.startswith("Found 2 components in category backgrounds:")

    def test_unknown_tool(self, server):
        error = call(server, "deleteEverything")["error"]
        assert error["code"] == METHOD_NOT_FOUND
        assert error["message"] == "Tool not found: deleteEverything"

    def test_invalid_params(self, server):
        assert call(server, "searchComponents", {"query": ""})["error"]["code"] == INVALID_PARAMS
        assert call(server, "getComponent", {})["error"]["code"] == INVALID_PARAMS

    def test_not_found(self, server):
        error = call(server, "getComponent", {"name": "Nonexistent"})["error"]
        assert error["code"] == NOT_FOUND

    def test_unexpected_failure_is_internal_error(self, server, service, monkeypatch):
        def explode():
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(service, "list_categories", explode)
        error = call(server, "listCategories")["error"]
        assert error["code"] == INTERNAL_ERROR
        assert error["message"] == "Internal error"
        assert error["data"]["details"] == "disk on fire"


class TestHandleMessage:
    def test_result_envelope(self, server):
        reply = server.handle_message({"jsonrpc": "2.0", "id": 7, "method": "tools/list"})
        assert reply["jsonrpc"] == "2.0"
        assert reply["id"] == 7
        assert len(reply["result"]["tools"]) == 4

    def test_error_envelope(self, server):
        reply = server.handle_message(
            {
                "jsonrpc": "2.0",
                "id": "a",
                "method": "tools/call",
                "params": {"name": "getComponent", "arguments": {"name": "Nope"}},
            }
        )
        assert "result" not in reply
        assert reply["error"]["code"] == NOT_FOUND

    def test_notification_gets_no_reply(self, server):
        assert server.handle_message({"jsonrpc": "2.0", "method": "notifications/initialized"}) is None

    def test_non_object_is_invalid_request(self, server):
        assert server.handle_message([1, 2])["error"]["code"] == -32600


class TestServe:
    def test_line_protocol(self, server):
        lines = [
            json.dumps({"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}),
            json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}),
            "",
            "{broken",
            json.dumps({"jsonrpc": "2.0", "id": 2, "method": "tools/list"}),
        ]
        stdout = io.StringIO()
        server.serve(io.StringIO("\n".join(lines) + "\n"), stdout)

        replies = [json.loads(line) for line in stdout.getvalue().splitlines()]
        assert [reply["id"] for reply in replies] == [1, None, 2]
        assert replies[0]["result"]["serverInfo"]["name"] == SERVER_NAME
        assert replies[1]["error"]["code"] == -32700
        assert len(replies[2]["result"]["tools"]) == 4


class FakeStore:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def restore_signals():
    saved = {signum: signal.getsignal(signum) for signum in (signal.SIGINT, signal.SIGTERM)}
    yield
    for signum, handler in saved.items():
        signal.signal(signum, handler)


class TestSignalHandlers:
    def test_sigint_closes_store_and_exits_cleanly(self, restore_signals):
        store = FakeStore()
        install_signal_handlers(store)

        with pytest.raises(SystemExit) as excinfo:
            signal.getsignal(signal.SIGINT)(signal.SIGINT, None)
        assert excinfo.value.code == 0
        assert store.closed

    def test_sigterm_keeps_serving(self, restore_signals):
        store = FakeStore()
        install_signal_handlers(store)

        signal.getsignal(signal.SIGTERM)(signal.SIGTERM, None)
        assert not store.closed
