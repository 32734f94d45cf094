"""
Runs commands off the event loop and posts their results back into it.
"""

import asyncio
import logging
from typing import Any, Callable, Set

from kafka_producer_tui.commands import Command

logger = logging.getLogger(__name__)


class CommandExecutor:
    """Executes commands in worker threads as tracked background tasks."""

    def __init__(self, deliver: Callable[[Any], None]):
        """
        Initialize the executor.

        Args:
            deliver: Called on the event loop with each command's result event
        """
        self._deliver = deliver
        self._background_tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._background_tasks)

    def submit(self, command: Command) -> asyncio.Task:
        """
        Schedule a command. Must be called from the running event loop.

        Args:
            command: Command to execute

        Returns:
            The background task delivering the command's result
        """
        logger.debug(f"Dispatching {command.name} command")
        task = asyncio.create_task(self._run(command), name=f"command-{command.name}")
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def _run(self, command: Command) -> None:
        result = await asyncio.to_thread(command.execute)
        self._deliver(result)

    async def drain(self) -> None:
        """Wait for every outstanding command to deliver its result."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks))
