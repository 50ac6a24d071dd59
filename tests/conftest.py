"""
Shared fixtures: a frozen business clock, in-memory stores and a fully wired core.

The clock starts on Monday 2025-12-01 10:00 in the business timezone so that
dates such as 25/12/2025 are still in the future.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from barberbot.core.config import settings
from barberbot.infrastructure.store.memory_repository import MemoryAppointmentRepository
from barberbot.infrastructure.store.memory_state_store import MemoryStateStore
from barberbot.infrastructure.whatsapp.mock_platform import MockMessagingPlatform
from barberbot.wiring.dependencies import build_core

BUSINESS_TZ = ZoneInfo("America/Sao_Paulo")
ADMIN_ID = "5582993230395@c.us"


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 12, 1, 10, 0, tzinfo=BUSINESS_TZ))


@pytest.fixture
def platform() -> MockMessagingPlatform:
    return MockMessagingPlatform()


@pytest.fixture
def store() -> MemoryStateStore:
    return MemoryStateStore()


@pytest.fixture
def repository() -> MemoryAppointmentRepository:
    return MemoryAppointmentRepository()


@pytest.fixture
def config():
    return settings.model_copy(
        update={
            "ADMIN_ID": ADMIN_ID,
            "ALLOWED_SENDER_SUFFIX": "@c.us",
            "OUTBOUND_ENABLED": True,
            "MAX_ACTIVE_APPOINTMENTS": 3,
            "SESSION_IDLE_MINUTES": 10,
            "SIDE_CHAT_IDLE_MINUTES": 7,
            "BOOKING_ECHO_GUARD_SECONDS": 60,
            "RETENTION_DAYS": 30,
        }
    )


@pytest.fixture
def core(store, repository, platform, clock, config):
    return build_core(store=store, repository=repository, platform=platform, clock=clock, config=config)


@pytest.fixture
def sent_to(platform):
    """Texts delivered to one recipient, in order."""

    def _sent_to(recipient_id: str) -> list[str]:
        return [text for rid, text in platform.sent if rid == recipient_id]

    return _sent_to
