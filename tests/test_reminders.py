"""
Tests for the scheduled jobs: same-day and next-day reminders, retention sweep.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from barberbot.application.utils import replies
from barberbot.domain.entities.appointment import Appointment
from barberbot.domain.entities.conversation_state import AppointmentRef, Step
from barberbot.wiring.dependencies import build_core

CLIENT_ID = "5511999990000@c.us"
OTHER_ID = "5511888880000@c.us"


async def add(repository, name, day, time, requester_id=CLIENT_ID):
    await repository.create(
        Appointment(
            client_name=name,
            date=day,
            time=time,
            requester_id=requester_id,
            created_at=datetime(2025, 11, 1, 9, 0),
        )
    )


@pytest.mark.asyncio
async def test_same_day_reminders_go_to_todays_clients(core, repository, sent_to):
    """Same-day reminders go only to requesters booked for today."""
    await add(repository, "Joao", date(2025, 12, 1), "15:00")
    await add(repository, "Maria", date(2025, 12, 1), "16:00", requester_id=OTHER_ID)
    await add(repository, "Pedro", date(2025, 12, 2), "09:00", requester_id="5511777770000@c.us")

    assert await core.reminders.run_same_day_reminders() == 2

    assert sent_to(CLIENT_ID) == [replies.same_day_reminder("Joao", "15:00")]
    assert sent_to(OTHER_ID) == [replies.same_day_reminder("Maria", "16:00")]
    assert sent_to("5511777770000@c.us") == []


@pytest.mark.asyncio
async def test_next_day_reminder_arms_presence_confirmation(core, repository, store, sent_to):
    """A next-day reminder leaves the requester waiting for a presence answer."""
    await add(repository, "Joao", date(2025, 12, 2), "09:00")

    assert await core.reminders.run_next_day_reminders() == 1

    assert sent_to(CLIENT_ID) == [replies.next_day_reminder("Joao", "2025-12-02", "09:00")]
    state = store.get_state(CLIENT_ID)
    assert state.step == Step.AWAIT_PRESENCE_CONFIRM
    assert state.pending_appointment == AppointmentRef(client_name="Joao", date="2025-12-02", time="09:00")


@pytest.mark.asyncio
async def test_no_appointments_tomorrow_sends_nothing(core, platform, store):
    """No appointments tomorrow means no reminders and no state."""
    assert await core.reminders.run_next_day_reminders() == 0
    assert platform.sent == []
    assert store.get_state(CLIENT_ID) is None


@pytest.mark.asyncio
async def test_retention_removes_appointments_older_than_thirty_days(core, repository):
    """Appointments older than thirty days are purged."""
    # Today is 2025-12-01: 31 days ago is removed, 29 days ago is kept
    await add(repository, "Antigo", date(2025, 10, 31), "09:00")
    await add(repository, "Recente", date(2025, 11, 2), "09:00")

    assert await core.reminders.run_retention_sweep() == 1

    assert [a.client_name for a in repository.all_appointments()] == ["Recente"]


@pytest.mark.asyncio
async def test_reminders_are_skipped_when_outbound_is_disabled(store, repository, platform, clock, config):
    """Reminders are counted but not sent while outbound is disabled."""
    quiet = build_core(
        store=store,
        repository=repository,
        platform=platform,
        clock=clock,
        config=config.model_copy(update={"OUTBOUND_ENABLED": False}),
    )
    await add(repository, "Joao", date(2025, 12, 1), "15:00")

    assert await quiet.reminders.run_same_day_reminders() == 1
    assert platform.sent == []
