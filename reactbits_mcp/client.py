"""Interactive terminal explorer that drives the tool server."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.shared.exceptions import McpError

from .config import CATEGORIES

logger = logging.getLogger("reactbits_mcp.client")

MENU = (
    "\nReactBits Component Explorer\n"
    "1. List all components\n"
    "2. List components by category\n"
    "3. Search components\n"
    "4. Get component details\n"
    "5. Exit"
)

Asker = Callable[[str], Awaitable[str]]


async def _console_input(prompt: str) -> str:
    return await asyncio.to_thread(input, prompt)


def result_text(result: Any) -> str:
    return "\n".join(
        block.text for block in result.content if getattr(block, "type", None) == "text"
    )


class ComponentExplorer:
    """Menu loop over an initialized MCP client session."""

    def __init__(
        self,
        session: ClientSession,
        ask: Asker = _console_input,
        write: Callable[[str], None] = print,
    ) -> None:
        self.session = session
        self._ask = ask
        self._write = write

    async def call(self, tool: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        try:
            result = await self.session.call_tool(tool, arguments or {})
        except McpError as exc:
            return f"Error: {exc}"
        return result_text(result)

    async def list_all(self) -> None:
        self._write(await self.call("listComponents"))

    async def list_by_category(self) -> None:
        self._write("\nSelect a category:")
        for index, category in enumerate(CATEGORIES, start=1):
            self._write(f"{index}. {category}")
        answer = (await self._ask("\nEnter category number: ")).strip()
        if not answer.isdigit() or not 1 <= int(answer) <= len(CATEGORIES):
            self._write("Invalid category")
            return
        category = CATEGORIES[int(answer) - 1]
        self._write(await self.call("listComponents", {"category": category}))

    async def search(self) -> None:
        query = (await self._ask("\nEnter search query: ")).strip()
        category = (
            await self._ask("Filter by category? (Press Enter to skip or enter category name): ")
        ).strip()
        arguments: Dict[str, Any] = {"query": query}
        if category:
            arguments["category"] = category
        self._write(await self.call("searchComponents", arguments))

    async def details(self) -> None:
        name = (await self._ask("\nEnter component name: ")).strip()
        self._write(await self.call("getComponent", {"name": name}))

    async def run(self) -> None:
        actions = {
            "1": self.list_all,
            "2": self.list_by_category,
            "3": self.search,
            "4": self.details,
        }
        self._write("Connected to ReactBits MCP Server!")
        self._write(await self.call("listCategories"))
        try:
            while True:
                self._write(MENU)
                choice = (await self._ask("\nSelect an option: ")).strip()
                if choice == "5":
                    self._write("Exiting...")
                    return
                action = actions.get(choice)
                if action is None:
                    self._write("Invalid option")
                    continue
                await action()
                await self._ask("\nPress Enter to continue...")
        except EOFError:
            self._write("Exiting...")


def server_parameters(db_path: Path, base_dir: Path) -> StdioServerParameters:
    return StdioServerParameters(
        command=sys.executable,
        args=[
            "-m",
            "reactbits_mcp.cli",
            "serve",
            "--db",
            str(db_path),
            "--base-dir",
            str(base_dir),
        ],
    )


async def explore(db_path: Path, base_dir: Path) -> None:
    """Spawn the tool server and run the explorer against it."""
    async with stdio_client(server_parameters(db_path, base_dir)) as (read, write):
        async with ClientSession(read, write) as session:
            await session.initialize()
            await ComponentExplorer(session).run()
