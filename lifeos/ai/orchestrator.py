"""
Primary/fallback orchestration across providers.

  - No primary configured      → secondary with the full tool set
  - Primary succeeds            → its reply (routed tools only)
  - Primary fails, FATAL        → re-raise; the secondary would fail the same way
  - Primary fails, TRANSIENT    → secondary with the full tool set
  - Both fail                   → ProviderFailedError naming both causes

The secondary always gets the full catalog; routing applies to the primary only.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from ..exceptions import ProviderFailedError
from .failures import FailureClass, classify_failure_with_reason
from .loop import AgenticAdapter
from .tools.registry import ToolRegistry
from .tools.router import route_tools
from .tools.schemas import ToolDefinition

logger = logging.getLogger(__name__)

Router = Callable[..., list[ToolDefinition]]


class FallbackOrchestrator:
    def __init__(
        self,
        primary: AgenticAdapter,
        secondary: AgenticAdapter,
        registry: ToolRegistry,
        router: Router = route_tools,
    ) -> None:
        self._primary = primary
        self._secondary = secondary
        self._registry = registry
        self._router = router
        self._last_provider: str | None = None

    @property
    def last_provider(self) -> str | None:
        """Name of the adapter that produced the most recent reply."""
        return self._last_provider

    @property
    def full_tools(self) -> Sequence[ToolDefinition]:
        return self._registry.definitions

    async def chat(self, message: str, conversation_id: str | None = None) -> str:
        if not self._primary.configured:
            logger.debug(
                "%s not configured, using %s", self._primary.name, self._secondary.name,
                extra={"conversation_id": conversation_id, "provider": self._secondary.name},
            )
            reply = await self._secondary.run_turn(message, conversation_id, self.full_tools)
            self._last_provider = self._secondary.name
            return reply

        tools = self._router(message, catalog=self.full_tools)
        logger.info(
            "Routing to %s with %d/%d tools",
            self._primary.name, len(tools), len(self.full_tools),
            extra={"conversation_id": conversation_id, "provider": self._primary.name},
        )
        try:
            reply = await self._primary.run_turn(message, conversation_id, tools)
            self._last_provider = self._primary.name
            return reply
        except Exception as primary_error:
            failure, reason = classify_failure_with_reason(primary_error)
            if failure is FailureClass.FATAL:
                logger.error(
                    "%s failed fatally (%s): %s", self._primary.name, reason, primary_error,
                    extra={
                        "conversation_id": conversation_id,
                        "provider": self._primary.name,
                        "failure_reason": reason,
                    },
                )
                raise
            logger.warning(
                "%s failed (%s), falling back to %s: %s",
                self._primary.name, reason, self._secondary.name, primary_error,
                extra={
                    "conversation_id": conversation_id,
                    "provider": self._primary.name,
                    "failure_reason": reason,
                },
            )

            try:
                reply = await self._secondary.run_turn(message, conversation_id, self.full_tools)
            except Exception as secondary_error:
                logger.error(
                    "%s fallback also failed: %s", self._secondary.name, secondary_error,
                    extra={"conversation_id": conversation_id, "provider": self._secondary.name},
                )
                raise ProviderFailedError(
                    self._primary.name, primary_error,
                    self._secondary.name, secondary_error,
                ) from secondary_error
            self._last_provider = self._secondary.name
            return reply
