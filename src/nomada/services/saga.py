"""Ordered forward steps with reverse-order compensation on failure."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

SagaContext = dict[str, Any]


@dataclass(frozen=True)
class SagaStep:
    """A forward action and the action that undoes it.

    The action's return value is stored in the saga context under ``name``,
    where later steps and compensations can read it.
    """

    name: str
    action: Callable[[SagaContext], Awaitable[Any]]
    compensation: Callable[[SagaContext], Awaitable[None]] | None = None


class Saga:
    def __init__(self, name: str, steps: list[SagaStep]) -> None:
        self.name = name
        self._steps = steps

    async def run(self) -> SagaContext:
        """Run every step in order.

        If a step raises, compensations of the steps that already completed run
        in reverse order and the step's original exception is re-raised.
        A failing compensation is logged and does not stop the others.
        """
        context: SagaContext = {}
        completed: list[SagaStep] = []

        for step in self._steps:
            try:
                context[step.name] = await step.action(context)
            except Exception as e:
                logger.warning("Saga %s failed at step %s: %s", self.name, step.name, e)
                await self._compensate(completed, context)
                raise
            completed.append(step)

        return context

    async def _compensate(self, completed: list[SagaStep], context: SagaContext) -> None:
        for step in reversed(completed):
            if step.compensation is None:
                continue
            try:
                await step.compensation(context)
                logger.info("Saga %s compensated step %s", self.name, step.name)
            except Exception:
                logger.exception("Saga %s compensation for step %s failed", self.name, step.name)
