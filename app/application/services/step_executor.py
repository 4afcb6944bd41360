"""Step executor: runs provisioning steps as a saga with manual compensation.

The relational store and the identity provider share no transaction, so a
workflow is expressed as an ordered list of SagaStep (forward action plus
optional compensating action). StepExecutor runs the forward actions in
order; on the first failure it runs the compensations of every step that
already succeeded, in strict reverse order, and re-raises the original error.

Compensation errors are logged and recorded in the CompensationLog; they never
replace the forward error. A run is shielded from caller cancellation: once
started it finishes (success or full rollback) even if the request goes away.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from app.shared.telemetry.tracing import TracedOperation, add_span_event
from app.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

SagaContext = dict[str, Any]
ForwardAction = Callable[[SagaContext], Awaitable[Mapping[str, Any] | None]]
CompensateAction = Callable[[SagaContext], Awaitable[None]]

# Runs detached from a cancelled caller are kept here until they finish.
_inflight_runs: set[asyncio.Task[SagaContext]] = set()


@dataclass(frozen=True)
class SagaStep:
    """One forward mutation and its undo.

    forward receives the context built so far and returns the values later
    steps need (merged into the context). compensate receives the same
    context and must only touch what forward wrote. Read-only steps (guards,
    lookups) have no compensate.
    """

    name: str
    forward: ForwardAction
    compensate: CompensateAction | None = None


@dataclass(frozen=True)
class CompensationFailure:
    """A compensate call that raised. Logged only, never surfaced to the caller."""

    step_name: str
    error: Exception


@dataclass
class CompensationLog:
    """Ordered record of succeeded steps for one in-flight saga."""

    completed: list[SagaStep] = field(default_factory=list)
    failures: list[CompensationFailure] = field(default_factory=list)

    def record(self, step: SagaStep) -> None:
        self.completed.append(step)

    def unwind_order(self) -> list[tuple[str, CompensateAction]]:
        """(step name, compensate) of succeeded steps that have one, most recent first."""
        return [
            (step.name, step.compensate)
            for step in reversed(self.completed)
            if step.compensate is not None
        ]


class _SagaRun:
    """State of a single execution; never shared between invocations."""

    def __init__(
        self,
        saga_name: str,
        steps: Sequence[SagaStep],
        context: SagaContext,
        log: CompensationLog,
    ) -> None:
        self.saga_name = saga_name
        self.saga_id = generate_cuid()
        self.steps = steps
        self.context = context
        self.log = log

    async def execute(self) -> SagaContext:
        logger.info(
            "Saga %s [%s] started (%d steps)",
            self.saga_name,
            self.saga_id,
            len(self.steps),
        )
        for step in self.steps:
            try:
                async with TracedOperation(
                    f"saga.{self.saga_name}.{step.name}",
                    {"saga.id": self.saga_id, "saga.step": step.name},
                ):
                    produced = await step.forward(self.context)
            except Exception as exc:
                logger.warning(
                    "Saga %s [%s] step %s failed (%s: %s); compensating %d step(s)",
                    self.saga_name,
                    self.saga_id,
                    step.name,
                    type(exc).__name__,
                    exc,
                    len(self.log.unwind_order()),
                )
                await self._compensate()
                raise
            if produced:
                self.context.update(produced)
            self.log.record(step)
            logger.debug(
                "Saga %s [%s] step %s completed",
                self.saga_name,
                self.saga_id,
                step.name,
            )
        logger.info("Saga %s [%s] completed", self.saga_name, self.saga_id)
        return self.context

    async def _compensate(self) -> None:
        for step_name, compensate in self.log.unwind_order():
            try:
                async with TracedOperation(
                    f"saga.{self.saga_name}.{step_name}.compensate",
                    {"saga.id": self.saga_id, "saga.step": step_name},
                ):
                    await compensate(self.context)
            except Exception as exc:
                self.log.failures.append(CompensationFailure(step_name, exc))
                add_span_event(
                    "saga.compensation_failed",
                    {"saga.id": self.saga_id, "saga.step": step_name},
                )
                logger.exception(
                    "Saga %s [%s] compensation for step %s failed; rows may be orphaned",
                    self.saga_name,
                    self.saga_id,
                    step_name,
                )
        if self.log.failures:
            logger.error(
                "Saga %s [%s] rolled back with %d compensation failure(s): %s",
                self.saga_name,
                self.saga_id,
                len(self.log.failures),
                ", ".join(f.step_name for f in self.log.failures),
            )
        else:
            logger.info("Saga %s [%s] rolled back", self.saga_name, self.saga_id)


class StepExecutor:
    """Generic saga engine shared by every provisioning workflow.

    Stateless: each call to run() gets its own saga id, context and
    compensation log, so one executor can serve concurrent requests.
    """

    async def run(
        self,
        steps: Sequence[SagaStep],
        initial: Mapping[str, Any] | None = None,
        *,
        saga_name: str,
        log: CompensationLog | None = None,
    ) -> SagaContext:
        """Run steps in order and return the accumulated context.

        Args:
            steps: Ordered steps; forward actions run in this order.
            initial: Values available to the first step.
            saga_name: Workflow name used in logs and span names.
            log: Optional log to observe succeeded steps and compensation failures.

        Returns:
            The context after every forward action has merged its output.

        Raises:
            Exception: The first forward failure, unchanged, after all
                compensations were attempted.
        """
        run = _SagaRun(saga_name, list(steps), dict(initial or {}), log or CompensationLog())
        task = asyncio.ensure_future(run.execute())
        _inflight_runs.add(task)
        task.add_done_callback(_inflight_runs.discard)
        return await asyncio.shield(task)
