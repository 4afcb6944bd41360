"""Unit tests for StepExecutor (ordering, reverse compensation, failure isolation, cancellation)."""

import asyncio

import pytest

from app.application.services.step_executor import (
    CompensationLog,
    SagaStep,
    StepExecutor,
)


class Boom(Exception):
    pass


def _recording_step(name: str, events: list[str], *, fail: bool = False, undo: bool = True) -> SagaStep:
    async def forward(context):
        events.append(f"do:{name}")
        if fail:
            raise Boom(name)
        return {name: True}

    async def compensate(context):
        events.append(f"undo:{name}")

    return SagaStep(name, forward, compensate if undo else None)


async def test_runs_steps_in_order_and_merges_context() -> None:
    events: list[str] = []
    steps = [_recording_step(n, events) for n in ("a", "b", "c")]

    context = await StepExecutor().run(steps, {"seed": 1}, saga_name="test")

    assert events == ["do:a", "do:b", "do:c"]
    assert context == {"seed": 1, "a": True, "b": True, "c": True}


async def test_later_steps_see_values_from_earlier_steps() -> None:
    async def first(context):
        return {"tenant_id": "t-1"}

    async def second(context):
        return {"branch_owner": context["tenant_id"]}

    context = await StepExecutor().run(
        [SagaStep("first", first), SagaStep("second", second)], saga_name="test"
    )
    assert context["branch_owner"] == "t-1"


async def test_failure_compensates_succeeded_steps_in_reverse_order() -> None:
    """Compensations run in exactly the reverse order of the successful forwards."""
    events: list[str] = []
    steps = [
        _recording_step("a", events),
        _recording_step("b", events),
        _recording_step("c", events),
        _recording_step("d", events, fail=True),
        _recording_step("e", events),
    ]

    with pytest.raises(Boom, match="d"):
        await StepExecutor().run(steps, saga_name="test")

    assert events == ["do:a", "do:b", "do:c", "do:d", "undo:c", "undo:b", "undo:a"]


async def test_failed_step_itself_is_not_compensated() -> None:
    events: list[str] = []
    steps = [_recording_step("a", events), _recording_step("b", events, fail=True)]

    with pytest.raises(Boom):
        await StepExecutor().run(steps, saga_name="test")

    assert "undo:b" not in events
    assert events[-1] == "undo:a"


async def test_steps_without_compensation_are_skipped_on_rollback() -> None:
    events: list[str] = []
    steps = [
        _recording_step("guard", events, undo=False),
        _recording_step("insert", events),
        _recording_step("fail", events, fail=True),
    ]

    with pytest.raises(Boom):
        await StepExecutor().run(steps, saga_name="test")

    assert events == ["do:guard", "do:insert", "do:fail", "undo:insert"]


async def test_first_step_failure_compensates_nothing() -> None:
    events: list[str] = []
    log = CompensationLog()

    with pytest.raises(Boom):
        await StepExecutor().run(
            [_recording_step("a", events, fail=True), _recording_step("b", events)],
            saga_name="test",
            log=log,
        )

    assert events == ["do:a"]
    assert log.completed == []
    assert log.failures == []


async def test_compensation_failure_keeps_original_error_and_continues() -> None:
    """A raising compensate is recorded; remaining compensations still run; forward error wins."""
    events: list[str] = []

    async def broken_undo(context):
        events.append("undo:b")
        raise RuntimeError("cannot delete b")

    async def forward_b(context):
        events.append("do:b")

    steps = [
        _recording_step("a", events),
        SagaStep("b", forward_b, broken_undo),
        _recording_step("c", events),
        _recording_step("d", events, fail=True),
    ]
    log = CompensationLog()

    with pytest.raises(Boom, match="d"):
        await StepExecutor().run(steps, saga_name="test", log=log)

    assert events == ["do:a", "do:b", "do:c", "do:d", "undo:c", "undo:b", "undo:a"]
    assert [f.step_name for f in log.failures] == ["b"]
    assert isinstance(log.failures[0].error, RuntimeError)


async def test_concurrent_runs_do_not_share_state() -> None:
    executor = StepExecutor()
    gate = asyncio.Event()

    async def wait_then_tag(context):
        await gate.wait()
        return {"tag": context["who"]}

    steps = [SagaStep("tag", wait_then_tag)]
    first = asyncio.create_task(executor.run(steps, {"who": "first"}, saga_name="test"))
    second = asyncio.create_task(executor.run(steps, {"who": "second"}, saga_name="test"))
    await asyncio.sleep(0)
    gate.set()

    assert (await first)["tag"] == "first"
    assert (await second)["tag"] == "second"


async def test_caller_cancellation_does_not_interrupt_the_run() -> None:
    """Once started, a saga finishes even if the awaiting caller is cancelled."""
    events: list[str] = []
    gate = asyncio.Event()

    async def slow(context):
        events.append("slow:start")
        await gate.wait()
        events.append("slow:done")

    async def fail(context):
        events.append("fail")
        raise Boom("late")

    async def undo_slow(context):
        events.append("undo:slow")

    steps = [SagaStep("slow", slow, undo_slow), SagaStep("fail", fail)]
    caller = asyncio.create_task(StepExecutor().run(steps, saga_name="test"))
    for _ in range(20):
        if events:
            break
        await asyncio.sleep(0)

    caller.cancel()
    with pytest.raises(asyncio.CancelledError):
        await caller

    gate.set()
    for _ in range(20):
        if "undo:slow" in events:
            break
        await asyncio.sleep(0)

    assert events == ["slow:start", "slow:done", "fail", "undo:slow"]


async def test_unwind_order_yields_compensations_most_recent_first() -> None:
    events: list[str] = []
    log = CompensationLog()
    for name, undo in (("a", True), ("guard", False), ("b", True)):
        log.record(_recording_step(name, events, undo=undo))

    unwind = log.unwind_order()
    assert [name for name, _ in unwind] == ["b", "a"]

    for _, compensate in unwind:
        await compensate({})
    assert events == ["undo:b", "undo:a"]
