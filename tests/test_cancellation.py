"""Tests for utils.cancellation."""

import asyncio

import pytest

from zapdesk_lnurl.errors import ProtocolError, ResolutionCancelled
from zapdesk_lnurl.utils.cancellation import CancellationToken, ResolutionSlot


class TestCancellationToken:
    def test_cancel(self):
        token = CancellationToken()
        assert not token.cancelled
        token.raise_if_cancelled()
        token.cancel()
        with pytest.raises(ResolutionCancelled) as exc_info:
            token.raise_if_cancelled()
        assert exc_info.value.resolution_id == token.resolution_id

    def test_unique_ids(self):
        assert CancellationToken().resolution_id != CancellationToken().resolution_id


class TestResolutionSlot:
    def test_issue_supersedes_previous(self):
        slot = ResolutionSlot()
        first = slot.issue()
        second = slot.issue()
        assert first.cancelled
        assert not second.cancelled
        assert slot.is_current(second)
        assert not slot.is_current(first)

    async def test_success_applied(self):
        applied = []
        slot = ResolutionSlot(on_apply=applied.append)

        async def resolve(token):
            return "invoice"

        outcome = await slot.run(resolve)
        assert outcome.ok
        assert outcome.value == "invoice"
        assert slot.current is outcome
        assert applied == [outcome]

    async def test_failure_applied(self):
        slot = ResolutionSlot()

        async def resolve(token):
            raise ProtocolError("no such user")

        outcome = await slot.run(resolve)
        assert not outcome.ok
        assert outcome.error.reason == "no such user"
        assert slot.current is outcome

    async def test_later_request_wins(self):
        applied = []
        slot = ResolutionSlot(on_apply=applied.append)
        release_a = asyncio.Event()
        a_started = asyncio.Event()

        async def resolve_a(token):
            a_started.set()
            await release_a.wait()
            return "A"

        async def resolve_b(token):
            return "B"

        task_a = asyncio.create_task(slot.run(resolve_a))
        await a_started.wait()
        outcome_b = await slot.run(resolve_b)
        release_a.set()
        outcome_a = await task_a

        assert outcome_a is None
        assert outcome_b.value == "B"
        assert slot.current.value == "B"
        assert [o.value for o in applied] == ["B"]

    async def test_superseded_failure_discarded(self):
        slot = ResolutionSlot()
        release_a = asyncio.Event()
        a_started = asyncio.Event()

        async def resolve_a(token):
            a_started.set()
            await release_a.wait()
            raise ProtocolError("stale failure")

        async def resolve_b(token):
            return "B"

        task_a = asyncio.create_task(slot.run(resolve_a))
        await a_started.wait()
        await slot.run(resolve_b)
        release_a.set()

        assert await task_a is None
        assert slot.current.ok
        assert slot.current.value == "B"

    async def test_resolution_sees_cancellation(self):
        slot = ResolutionSlot()
        release_a = asyncio.Event()
        a_started = asyncio.Event()

        async def resolve_a(token):
            a_started.set()
            await release_a.wait()
            token.raise_if_cancelled()
            return "A"

        task_a = asyncio.create_task(slot.run(resolve_a))
        await a_started.wait()
        slot.cancel()
        release_a.set()

        assert await task_a is None
        assert slot.current is None
