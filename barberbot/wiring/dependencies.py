from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine

from barberbot.core.config import Settings, settings
from barberbot.application.ports.appointment_repository import AppointmentRepositoryPort
from barberbot.application.ports.message_platform import MessagePlatformPort
from barberbot.application.ports.state_store import StateStorePort
from barberbot.application.use_cases.availability import AvailabilityUseCase
from barberbot.application.use_cases.booking import BookingUseCase
from barberbot.application.use_cases.cancellation import CancellationUseCase
from barberbot.application.use_cases.collect_feedback import CollectFeedbackUseCase
from barberbot.application.use_cases.generate_report import GenerateReportUseCase
from barberbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from barberbot.application.use_cases.reminders import ReminderUseCase
from barberbot.application.use_cases.send_message import SendMessageUseCase
from barberbot.application.use_cases.side_conversation import SideConversationManager
from barberbot.application.use_cases.style_triage import StyleTriageUseCase
from barberbot.application.use_cases.sweep_idle_sessions import SweepIdleSessionsUseCase
from barberbot.application.utils.clock import Clock, business_clock
from barberbot.infrastructure.knowledge.style_catalog_store import StyleCatalogStore
from barberbot.infrastructure.store.database import build_engine, build_session_factory
from barberbot.infrastructure.store.json_state_store import JsonStateStore
from barberbot.infrastructure.store.memory_repository import MemoryAppointmentRepository
from barberbot.infrastructure.store.memory_state_store import MemoryStateStore
from barberbot.infrastructure.store.sql_repository import SqlAppointmentRepository
from barberbot.infrastructure.whatsapp.gateway_client import GatewayClient
from barberbot.infrastructure.whatsapp.gateway_platform import GatewayPlatform
from barberbot.infrastructure.whatsapp.mock_platform import MockMessagingPlatform


@dataclass(frozen=True)
class Core:
    handle_incoming_message: HandleIncomingMessageUseCase
    reminders: ReminderUseCase
    sweep_idle_sessions: SweepIdleSessionsUseCase
    side_conversation: SideConversationManager
    store: StateStorePort
    repository: AppointmentRepositoryPort


_engine: AsyncEngine | None = None
_state_store: StateStorePort | None = None
_repository: AppointmentRepositoryPort | None = None
_platform: MessagePlatformPort | None = None
_core: Core | None = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = build_engine(settings.DATABASE_URL)
    return _engine


def get_state_store() -> StateStorePort:
    global _state_store
    if _state_store is None:
        if settings.STATE_STORE_PROVIDER.lower() == "json":
            _state_store = JsonStateStore(data_dir=settings.STATE_DATA_DIR)
        else:
            _state_store = MemoryStateStore()
    return _state_store


def get_repository() -> AppointmentRepositoryPort:
    global _repository
    if _repository is None:
        if settings.REPOSITORY_PROVIDER.lower() == "memory":
            _repository = MemoryAppointmentRepository()
        else:
            _repository = SqlAppointmentRepository(build_session_factory(get_engine()))
    return _repository


def get_messaging_platform() -> MessagePlatformPort:
    global _platform
    if _platform is not None:
        return _platform

    logger = logging.getLogger(__name__)
    logger.info("GATEWAY_SEND_ENDPOINT present=%s", bool(settings.GATEWAY_SEND_ENDPOINT))
    logger.info("ENV=%s", settings.ENV)

    if not settings.GATEWAY_SEND_ENDPOINT:
        if settings.ENV.lower() in {"dev", "local"}:
            logger.info("Using MockMessagingPlatform (endpoint missing, ENV=dev/local)")
            _platform = MockMessagingPlatform()
            return _platform
        raise ValueError("GATEWAY_SEND_ENDPOINT is required to send WhatsApp messages.")

    logger.info("Using real GatewayPlatform")
    client = GatewayClient(
        send_endpoint=settings.GATEWAY_SEND_ENDPOINT,
        api_token=settings.GATEWAY_API_TOKEN,
    )
    _platform = GatewayPlatform(client=client)
    return _platform


def build_core(
    store: StateStorePort,
    repository: AppointmentRepositoryPort,
    platform: MessagePlatformPort,
    clock: Clock,
    config: Settings,
) -> Core:
    send_message = SendMessageUseCase(
        platform=platform,
        admin_id=config.ADMIN_ID,
        enabled=config.OUTBOUND_ENABLED,
    )
    availability = AvailabilityUseCase(repository=repository, admin_id=config.ADMIN_ID)
    side_conversation = SideConversationManager(
        store=store,
        send_message=send_message,
        clock=clock,
        idle_timeout_seconds=config.SIDE_CHAT_IDLE_MINUTES * 60,
    )
    handle_incoming_message = HandleIncomingMessageUseCase(
        store=store,
        availability=availability,
        booking=BookingUseCase(
            repository=repository,
            availability=availability,
            send_message=send_message,
            store=store,
            clock=clock,
            max_active_appointments=config.MAX_ACTIVE_APPOINTMENTS,
        ),
        cancellation=CancellationUseCase(repository=repository, send_message=send_message, clock=clock),
        side_conversation=side_conversation,
        style_triage=StyleTriageUseCase(catalog=StyleCatalogStore()),
        collect_feedback=CollectFeedbackUseCase(repository=repository, clock=clock),
        generate_report=GenerateReportUseCase(repository=repository, admin_id=config.ADMIN_ID, clock=clock),
        send_message=send_message,
        clock=clock,
        allowed_sender_suffix=config.ALLOWED_SENDER_SUFFIX,
        echo_guard_seconds=config.BOOKING_ECHO_GUARD_SECONDS,
    )
    return Core(
        handle_incoming_message=handle_incoming_message,
        reminders=ReminderUseCase(
            repository=repository,
            store=store,
            send_message=send_message,
            clock=clock,
            retention_days=config.RETENTION_DAYS,
        ),
        sweep_idle_sessions=SweepIdleSessionsUseCase(
            store=store,
            side_conversation=side_conversation,
            clock=clock,
            state_idle_seconds=config.SESSION_IDLE_MINUTES * 60,
            echo_guard_seconds=config.BOOKING_ECHO_GUARD_SECONDS,
        ),
        side_conversation=side_conversation,
        store=store,
        repository=repository,
    )


def get_core() -> Core:
    global _core
    if _core is None:
        _core = build_core(
            store=get_state_store(),
            repository=get_repository(),
            platform=get_messaging_platform(),
            clock=business_clock(settings.BUSINESS_TIMEZONE),
            config=settings,
        )
    return _core


def get_handle_incoming_message_use_case() -> HandleIncomingMessageUseCase:
    return get_core().handle_incoming_message


def get_reminder_use_case() -> ReminderUseCase:
    return get_core().reminders

