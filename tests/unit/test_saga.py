import pytest

from nomada.services.saga import Saga, SagaStep


def _recorder(calls, label, result=None, error=None):
    async def step(context):
        calls.append(label)
        if error is not None:
            raise error
        return result

    return step


@pytest.mark.asyncio
async def test_runs_steps_in_order_and_collects_results():
    calls = []
    saga = Saga(
        "test",
        [
            SagaStep("first", _recorder(calls, "first", result=1)),
            SagaStep("second", _recorder(calls, "second", result=2)),
        ],
    )

    context = await saga.run()

    assert calls == ["first", "second"]
    assert context == {"first": 1, "second": 2}


@pytest.mark.asyncio
async def test_later_steps_see_earlier_results():
    async def second(context):
        return context["first"] + 1

    context = await Saga("test", [SagaStep("first", _recorder([], "first", result=41)), SagaStep("second", second)]).run()

    assert context["second"] == 42


@pytest.mark.asyncio
async def test_failure_compensates_completed_steps_in_reverse():
    calls = []
    saga = Saga(
        "test",
        [
            SagaStep("a", _recorder(calls, "a"), compensation=_recorder(calls, "undo a")),
            SagaStep("b", _recorder(calls, "b"), compensation=_recorder(calls, "undo b")),
            SagaStep("c", _recorder(calls, "c", error=RuntimeError("c broke")), compensation=_recorder(calls, "undo c")),
        ],
    )

    with pytest.raises(RuntimeError, match="c broke"):
        await saga.run()

    assert calls == ["a", "b", "c", "undo b", "undo a"]


@pytest.mark.asyncio
async def test_failed_compensation_does_not_mask_original_error(caplog):
    calls = []
    saga = Saga(
        "test",
        [
            SagaStep("a", _recorder(calls, "a"), compensation=_recorder(calls, "undo a")),
            SagaStep("b", _recorder(calls, "b"), compensation=_recorder(calls, "undo b", error=OSError("gone"))),
            SagaStep("c", _recorder(calls, "c", error=ValueError("primary"))),
        ],
    )

    with pytest.raises(ValueError, match="primary"):
        await saga.run()

    assert calls == ["a", "b", "c", "undo b", "undo a"]
    assert "compensation for step b failed" in caplog.text


@pytest.mark.asyncio
async def test_steps_without_compensation_are_skipped():
    calls = []
    saga = Saga(
        "test",
        [
            SagaStep("a", _recorder(calls, "a")),
            SagaStep("b", _recorder(calls, "b", error=RuntimeError("boom"))),
        ],
    )

    with pytest.raises(RuntimeError):
        await saga.run()

    assert calls == ["a", "b"]
