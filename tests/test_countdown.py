"""Tests for the passive reservation countdown."""

import asyncio

import pytest

from conftest import add_step
from stonecart.cart import CartStatus
from stonecart.checkout import ReservationCountdown


def advancing_sleep(clock):
    async def sleep(seconds):
        clock.advance(seconds=seconds)
        await asyncio.sleep(0)

    return sleep


class TestReservationCountdown:
    @pytest.mark.asyncio
    async def test_ticks_down_to_zero(self, aggregate, machine, clock):
        aggregate.add_item(add_step())
        machine.reserve(timeout_minutes=1)
        ticks = []

        countdown = ReservationCountdown(lambda: machine.seconds_remaining, on_tick=ticks.append, sleep=advancing_sleep(clock))
        countdown.start()
        await countdown.wait()

        assert ticks == list(range(60, -1, -1))
        assert countdown.expired
        assert not countdown.running
        assert machine.is_reservation_expired
        assert machine.status == CartStatus.RESERVED

    @pytest.mark.asyncio
    async def test_on_expired_called_once(self):
        calls = []
        countdown = ReservationCountdown(lambda: 0, on_expired=lambda: calls.append(True))

        async with countdown:
            await countdown.wait()

        assert calls == [True]

    @pytest.mark.asyncio
    async def test_stop_cancels_task(self):
        async def never(seconds):
            await asyncio.Event().wait()

        ticks = []
        countdown = ReservationCountdown(lambda: 120, on_tick=ticks.append, sleep=never)
        task = countdown.start()
        await asyncio.sleep(0)

        countdown.stop()
        await countdown.wait()

        assert task.cancelled()
        assert ticks == [120]
        assert not countdown.expired
        assert not countdown.running

    @pytest.mark.asyncio
    async def test_context_manager_never_leaks_task(self):
        async def never(seconds):
            await asyncio.Event().wait()

        async with ReservationCountdown(lambda: 30, sleep=never) as countdown:
            await asyncio.sleep(0)
            assert countdown.running

        assert not countdown.running

    @pytest.mark.asyncio
    async def test_start_twice_reuses_task(self):
        async def never(seconds):
            await asyncio.Event().wait()

        countdown = ReservationCountdown(lambda: 30, sleep=never)
        first = countdown.start()

        assert countdown.start() is first
        countdown.stop()
        await countdown.wait()

    @pytest.mark.asyncio
    async def test_wait_before_start(self):
        await ReservationCountdown(lambda: 30).wait()
