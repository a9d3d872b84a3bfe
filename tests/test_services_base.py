from __future__ import annotations

import asyncio
from collections.abc import Sequence

import pytest

from item_services.models import ItemViewModel
from item_services.services.base import ComposableItemService, ItemsServiceWithFallback, with_fallback, with_retry


def _view(title: str) -> ItemViewModel:
    return ItemViewModel(title=title, subtitle="", select=lambda: None)


class _ScriptedService(ComposableItemService):
    """Plays back one outcome per call: a list of views or an exception."""

    def __init__(self, name: str, outcomes: Sequence[list[ItemViewModel] | Exception], log: list[str]) -> None:
        self.name = name
        self.outcomes = list(outcomes)
        self.log = log
        self.calls = 0

    async def load_items(self) -> list[ItemViewModel]:
        self.calls += 1
        self.log.append(f"{self.name}:start")
        outcome = self.outcomes.pop(0)
        self.log.append(f"{self.name}:end")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.mark.asyncio
async def test_fallback_returns_primary_result_without_touching_fallback() -> None:
    log: list[str] = []
    items = [_view("a"), _view("b")]
    primary = _ScriptedService("primary", [items], log)
    secondary = _ScriptedService("fallback", [[_view("x")]], log)

    result = await with_fallback(primary, secondary).load_items()

    assert result is items
    assert secondary.calls == 0


@pytest.mark.asyncio
async def test_fallback_returns_fallback_result_when_primary_fails() -> None:
    log: list[str] = []
    fallback_items = [_view("cached")]
    primary = _ScriptedService("primary", [RuntimeError("offline")], log)
    secondary = _ScriptedService("fallback", [fallback_items], log)

    result = await ItemsServiceWithFallback(primary, secondary).load_items()

    assert result is fallback_items
    assert log == ["primary:start", "primary:end", "fallback:start", "fallback:end"]


@pytest.mark.asyncio
async def test_fallback_raises_fallback_error_when_both_fail() -> None:
    log: list[str] = []
    primary_error = RuntimeError("api down")
    fallback_error = LookupError("cache empty")
    primary = _ScriptedService("primary", [primary_error], log)
    secondary = _ScriptedService("fallback", [fallback_error], log)

    with pytest.raises(LookupError) as excinfo:
        await primary.fallback(secondary).load_items()

    assert excinfo.value is fallback_error


@pytest.mark.asyncio
async def test_fallback_calls_each_source_at_most_once() -> None:
    log: list[str] = []
    primary = _ScriptedService("primary", [RuntimeError("x")], log)
    secondary = _ScriptedService("fallback", [RuntimeError("y")], log)

    with pytest.raises(RuntimeError):
        await with_fallback(primary, secondary).load_items()

    assert (primary.calls, secondary.calls) == (1, 1)


def test_retry_zero_is_pass_through() -> None:
    service = _ScriptedService("api", [], [])
    assert with_retry(service, 0) is service


def test_retry_rejects_negative_count() -> None:
    with pytest.raises(ValueError):
        with_retry(_ScriptedService("api", [], []), -1)


def test_retry_nests_fallbacks_onto_the_same_service() -> None:
    service = _ScriptedService("api", [], [])

    composed = service.retry(2)

    assert isinstance(composed, ItemsServiceWithFallback)
    assert composed.fallback_service is service
    inner = composed.primary
    assert isinstance(inner, ItemsServiceWithFallback)
    assert inner.primary is service
    assert inner.fallback_service is service


@pytest.mark.asyncio
async def test_retry_succeeds_on_third_attempt() -> None:
    log: list[str] = []
    items = [_view("c1")]
    service = _ScriptedService("api", [RuntimeError("1"), RuntimeError("2"), items], log)

    result = await with_retry(service, 2).load_items()

    assert [v.title for v in result] == ["c1"]
    assert service.calls == 3


@pytest.mark.asyncio
async def test_retry_stops_at_first_success() -> None:
    service = _ScriptedService("api", [RuntimeError("1"), [_view("ok")], [_view("unused")]], [])

    result = await with_retry(service, 5).load_items()

    assert [v.title for v in result] == ["ok"]
    assert service.calls == 2


@pytest.mark.asyncio
async def test_retry_delivers_last_attempt_error_when_all_fail() -> None:
    errors = [RuntimeError("first"), RuntimeError("second"), RuntimeError("third")]
    service = _ScriptedService("api", list(errors), [])

    with pytest.raises(RuntimeError) as excinfo:
        await with_retry(service, 2).load_items()

    assert excinfo.value is errors[-1]
    assert service.calls == 3


@pytest.mark.asyncio
async def test_attempts_never_overlap() -> None:
    log: list[str] = []
    service = _ScriptedService("api", [RuntimeError("1"), RuntimeError("2"), [_view("ok")]], log)

    await with_retry(service, 2).load_items()

    assert log == ["api:start", "api:end"] * 3


@pytest.mark.asyncio
async def test_retry_then_fallback_to_other_source() -> None:
    log: list[str] = []
    api = _ScriptedService("api", [RuntimeError("1"), RuntimeError("2")], log)
    cache = _ScriptedService("cache", [[_view("cached")]], log)

    result = await api.retry(1).fallback(cache).load_items()

    assert [v.title for v in result] == ["cached"]
    assert api.calls == 2
    assert cache.calls == 1


@pytest.mark.asyncio
async def test_fallback_does_not_swallow_cancellation() -> None:
    class _Cancelled:
        async def load_items(self) -> list[ItemViewModel]:
            raise asyncio.CancelledError()

    secondary = _ScriptedService("fallback", [[_view("x")]], [])

    with pytest.raises(asyncio.CancelledError):
        await with_fallback(_Cancelled(), secondary).load_items()

    assert secondary.calls == 0


@pytest.mark.asyncio
async def test_plain_structural_services_compose() -> None:
    class _Flaky:
        def __init__(self) -> None:
            self.calls = 0

        async def load_items(self) -> list[ItemViewModel]:
            self.calls += 1
            if self.calls < 2:
                raise RuntimeError("first call fails")
            return [_view("ok")]

    flaky = _Flaky()

    result = await with_retry(flaky, 1).load_items()
    chained = with_fallback(flaky, flaky).retry(1)

    assert [v.title for v in result] == ["ok"]
    assert flaky.calls == 2
    assert isinstance(chained, ItemsServiceWithFallback)
