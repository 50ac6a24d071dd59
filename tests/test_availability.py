"""
Tests for business hours, slot labels and the availability listing format.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from barberbot.application.use_cases.availability import (
    AvailabilityUseCase,
    business_hours_for,
    format_listing,
    slot_labels,
)
from barberbot.domain.entities.appointment import Appointment
from barberbot.domain.entities.slot import SlotStatus

ADMIN_ID = "5582993230395@c.us"
MONDAY = date(2025, 12, 1)
SATURDAY = date(2025, 12, 6)
SUNDAY = date(2025, 12, 7)


def test_business_hours_saturday_is_shorter():
    """Saturday closes earlier; every other day, Sunday included, uses the weekday hours."""
    assert business_hours_for(SATURDAY) == (10, 16)
    assert business_hours_for(MONDAY) == (9, 20)
    # No special rule for Sunday
    assert business_hours_for(SUNDAY) == (9, 20)


def test_slot_labels_are_half_hourly_and_exclude_closing_time():
    """Slots run every thirty minutes from opening up to, but not including, closing time."""
    labels = slot_labels(MONDAY)
    assert labels[0] == "09:00"
    assert labels[1] == "09:30"
    assert labels[-1] == "19:30"
    assert "20:00" not in labels
    assert len(labels) == 22

    saturday = slot_labels(SATURDAY)
    assert saturday[0] == "10:00"
    assert saturday[-1] == "15:30"
    assert len(saturday) == 12


def test_format_listing_lines():
    """Each slot renders on its own line with its availability marker."""
    listing = format_listing(
        [
            SlotStatus(time="09:00", booked=False),
            SlotStatus(time="09:30", booked=True, occupant_name="Joao"),
            SlotStatus(time="10:00", booked=True),
        ]
    )
    assert listing == "09:00 ✅ (disponível)\n09:30 ⏰ (agendado - Joao)\n10:00 ⏰ (agendado)"


@pytest.mark.asyncio
async def test_occupant_name_only_visible_to_admin(repository):
    """Only the admin sees who holds a booked slot."""
    await repository.create(
        Appointment(
            client_name="Joao",
            date=MONDAY,
            time="09:30",
            requester_id="5511999990000@c.us",
            created_at=datetime(2025, 11, 30, 12, 0),
        )
    )
    availability = AvailabilityUseCase(repository=repository, admin_id=ADMIN_ID)

    client_view = await availability.listing(MONDAY, "5511888880000@c.us")
    admin_view = await availability.listing(MONDAY, ADMIN_ID)

    assert "09:30 ⏰ (agendado)" in client_view
    assert "Joao" not in client_view
    assert "09:30 ⏰ (agendado - Joao)" in admin_view
    assert "09:00 ✅ (disponível)" in admin_view


@pytest.mark.asyncio
async def test_list_slots_marks_only_booked_labels(repository):
    """Booked labels carry the occupant; every other label stays free."""
    await repository.create(
        Appointment(
            client_name="Ana",
            date=SATURDAY,
            time="10:00",
            requester_id="5511777770000@c.us",
            created_at=datetime(2025, 12, 1, 9, 0),
        )
    )
    availability = AvailabilityUseCase(repository=repository, admin_id=ADMIN_ID)

    slots = await availability.list_slots(SATURDAY, ADMIN_ID)

    assert [s.time for s in slots if s.booked] == ["10:00"]
    assert slots[0].occupant_name == "Ana"
