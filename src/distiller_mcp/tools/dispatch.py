"""Execute catalog tools on behalf of either protocol adapter."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from distiller_mcp.config import Settings
from distiller_mcp.execution.errors import UnknownToolError
from distiller_mcp.execution.service import DistillerService
from distiller_mcp.tools.capabilities import build_capabilities
from distiller_mcp.tools.catalog import DEFAULT_CATALOG, ToolCatalog, ToolSpec
from distiller_mcp.tools.listing import list_files

logger = logging.getLogger(__name__)

LocalHandler = Callable[[Mapping[str, Any]], Awaitable[str]]


class ToolDispatcher:
    """Validate, shape, run, and render one tool call."""

    def __init__(
        self,
        *,
        service: DistillerService,
        settings: Settings,
        catalog: ToolCatalog = DEFAULT_CATALOG,
    ) -> None:
        self.service = service
        self.settings = settings
        self.catalog = catalog
        self._local_handlers: dict[str, LocalHandler] = {
            "get_capabilities": self._get_capabilities,
            "list_files": self._list_files,
        }

    async def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> str:
        """Run a tool and return the text shown to the agent.

        Raises:
            UnknownToolError: the name is not in the catalog.
            RequestValidationError: the arguments do not match the declaration.
            DistillerError: the external tool failed in any other way.
        """

        spec = self.catalog.get(name)
        started = time.monotonic()
        try:
            if not spec.runs_binary:
                return await self._call_local(spec, arguments)
            checked = spec.validate_arguments(arguments)
            request = spec.shape(checked)
            result = await self.service.run(request)
            return spec.render(result, checked)
        except Exception:
            logger.debug("Tool %s failed", name, exc_info=True)
            raise
        finally:
            logger.info("Tool %s finished in %.1f ms", name, (time.monotonic() - started) * 1000)

    def capabilities(self) -> dict[str, object]:
        return build_capabilities(self.settings, self.catalog.names_by_category())

    async def _call_local(self, spec: ToolSpec, arguments: Mapping[str, Any] | None) -> str:
        handler = self._local_handlers.get(spec.name)
        if handler is None:
            raise UnknownToolError(spec.name)
        return await handler(spec.validate_arguments(arguments))

    async def _get_capabilities(self, arguments: Mapping[str, Any]) -> str:
        return json.dumps(self.capabilities(), indent=2)

    async def _list_files(self, arguments: Mapping[str, Any]) -> str:
        listing = await asyncio.to_thread(
            list_files,
            arguments.get("path"),
            pattern=arguments.get("pattern"),
            recursive=arguments.get("recursive", True),
            base=self.settings.tool.root,
        )
        return json.dumps(listing.to_dict(), indent=2)
