from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime

from barberbot.application.exceptions import RepositoryError, UnauthorizedActionError
from barberbot.application.ports.state_store import StateStorePort
from barberbot.application.use_cases.availability import AvailabilityUseCase
from barberbot.application.use_cases.booking import BookingUseCase
from barberbot.application.use_cases.cancellation import CancellationUseCase
from barberbot.application.use_cases.collect_feedback import CollectFeedbackUseCase
from barberbot.application.use_cases.generate_report import GenerateReportUseCase
from barberbot.application.use_cases.send_message import SendMessageUseCase
from barberbot.application.use_cases.side_conversation import SideConversationManager
from barberbot.application.use_cases.style_triage import StyleTriageUseCase
from barberbot.application.utils import replies
from barberbot.application.utils.clock import Clock
from barberbot.application.utils.validators import is_valid_time, parse_date, parse_rating
from barberbot.domain.entities.conversation_state import ConversationState, Step
from barberbot.domain.entities.message import Message

MENU_DIGITS = ("1", "2", "3", "4", "5", "6", "7")
EXIT_KEYWORDS = ("sair", "quit")
CONFIRM_KEYWORDS = ("sim", "yes")
DECLINE_KEYWORDS = ("não", "no")
GROUP_SUFFIX = "@g.us"


class HandleIncomingMessageUseCase:
    def __init__(
        self,
        store: StateStorePort,
        availability: AvailabilityUseCase,
        booking: BookingUseCase,
        cancellation: CancellationUseCase,
        side_conversation: SideConversationManager,
        style_triage: StyleTriageUseCase,
        collect_feedback: CollectFeedbackUseCase,
        generate_report: GenerateReportUseCase,
        send_message: SendMessageUseCase,
        clock: Clock,
        allowed_sender_suffix: str = "@c.us",
        echo_guard_seconds: float = 60,
    ) -> None:
        self._store = store
        self._availability = availability
        self._booking = booking
        self._cancellation = cancellation
        self._side_conversation = side_conversation
        self._style_triage = style_triage
        self._collect_feedback = collect_feedback
        self._generate_report = generate_report
        self._send_message = send_message
        self._clock = clock
        self._allowed_sender_suffix = allowed_sender_suffix
        self._echo_guard_seconds = echo_guard_seconds
        self._logger = logging.getLogger(__name__)

    async def handle_message(self, message: Message) -> None:
        """Transport entry point: apply chat-level rules, then reply through the platform."""
        if message.sender_id.endswith(GROUP_SUFFIX):
            self._logger.info("Group message ignored", extra={"requester_id": message.sender_id})
            return

        if message.has_media:
            await self._send_message.execute(message.sender_id, replies.with_menu(replies.MEDIA_NOT_SUPPORTED))
            return

        self._logger.info("Message received", extra={"message_id": message.id, "requester_id": message.sender_id})
        try:
            reply = await self.handle(message.sender_id, message.text)
        except Exception as e:
            self._logger.exception(
                "Error handling message", extra={"message_id": message.id, "error": str(e)}
            )
            self._store.delete_state(message.sender_id)
            reply = replies.with_menu(replies.GENERIC_ERROR)

        if reply is None:
            return
        did_send = await self._send_message.execute(message.sender_id, reply)
        if did_send:
            self._logger.info("Reply sent", extra={"message_id": message.id, "requester_id": message.sender_id})

    async def handle(self, sender_id: str, text: str) -> str | None:
        """
        Decide the reply for one inbound message. None means nothing should be sent.
        Store failures reset the requester to the menu with a generic message.
        """
        if self._allowed_sender_suffix and not sender_id.endswith(self._allowed_sender_suffix):
            self._logger.warning("Message ignored: sender is not a direct chat", extra={"requester_id": sender_id})
            return None

        try:
            return await self._route(sender_id, text)
        except RepositoryError as e:
            self._logger.exception("Repository failure", extra={"requester_id": sender_id, "error": str(e)})
            self._store.delete_state(sender_id)
            return replies.with_menu(replies.GENERIC_ERROR)

    async def _route(self, sender_id: str, text: str) -> str | None:
        now = self._clock()
        message = text.strip()
        lowered = message.lower()

        state = self._store.get_state(sender_id)
        if state is not None:
            state = replace(state, last_contact_at=now.timestamp())
            self._store.set_state(sender_id, state)

        if self._store.consume_recent_booking(sender_id, now.timestamp(), self._echo_guard_seconds):
            self._logger.info("Message after booking swallowed", extra={"requester_id": sender_id})
            return replies.build_menu()

        side_reply = self._side_conversation.handle(sender_id, message)
        if side_reply.handled:
            return side_reply.text

        if state is not None and state.step is not None:
            if lowered in EXIT_KEYWORDS:
                self._store.delete_state(sender_id)
                return replies.build_menu()
            return await self._handle_step(sender_id, message, lowered, state, now)

        return await self._handle_menu(sender_id, message, lowered, now)

    async def _handle_menu(self, sender_id: str, message: str, lowered: str, now: datetime) -> str | None:
        if message in MENU_DIGITS:
            return await self._handle_digit(sender_id, message, now)

        if lowered.startswith("triagem"):
            tokens = message.split()
            if len(tokens) >= 3:
                return self._style_triage.execute(" ".join(tokens[1:-1]), tokens[-1])
            return replies.with_menu("Formato: triagem [estilo] [nome]")

        if lowered.startswith("feedback"):
            tokens = message.split()
            if len(tokens) >= 4:
                return await self._collect_feedback.execute(
                    client_name=tokens[1],
                    comment=" ".join(tokens[2:-1]),
                    rating=parse_rating(tokens[-1]),
                )
            return replies.with_menu("Formato: feedback [nome] [comentario] [avaliação de 1 a 5]")

        if lowered == "relatorio":
            try:
                return await self._generate_report.execute(sender_id)
            except UnauthorizedActionError:
                self._logger.warning("Report refused", extra={"requester_id": sender_id})
                return replies.with_menu("Apenas o administrador pode acessar relatórios.")

        return replies.build_menu()

    async def _handle_digit(self, sender_id: str, digit: str, now: datetime) -> str | None:
        if digit == "1":
            self._enter_step(sender_id, Step.AWAIT_DATE, now)
            return replies.DATE_PROMPT
        if digit == "2":
            self._enter_step(sender_id, Step.AWAIT_CANCEL_NAME_TIME, now)
            return replies.CANCEL_PROMPT
        if digit == "3":
            listing = await self._availability.listing(now.date(), sender_id)
            return replies.with_menu(listing)
        if digit == "4":
            return replies.with_menu(replies.BUSINESS_HOURS_TEXT)
        if digit == "5":
            return replies.with_menu(replies.ADDRESS_TEXT)
        if digit == "6":
            return self._side_conversation.start(sender_id)

        self._side_conversation.end(sender_id)
        self._store.delete_state(sender_id)
        return replies.FAREWELL

    async def _handle_step(
        self,
        sender_id: str,
        message: str,
        lowered: str,
        state: ConversationState,
        now: datetime,
    ) -> str | None:
        if state.step == Step.AWAIT_DATE:
            day = parse_date(message)
            if day is None:
                return replies.INVALID_DATE
            if day < now.date():
                self._logger.info("Past date rejected", extra={"requester_id": sender_id, "date": day.isoformat()})
                return replies.PAST_DATE
            listing = await self._availability.listing(day, sender_id)
            self._store.set_state(sender_id, replace(state, step=Step.AWAIT_TIME, pending_date=day.isoformat()))
            return f"{listing}\n\n{replies.TIME_PROMPT}"

        if state.step == Step.AWAIT_TIME:
            if not is_valid_time(message):
                return f"{replies.INVALID_TIME}\n\n{replies.TIME_PROMPT}"
            self._store.set_state(sender_id, replace(state, step=Step.AWAIT_NAME, pending_time=message))
            return replies.NAME_PROMPT

        if state.step == Step.AWAIT_NAME:
            self._store.delete_state(sender_id)
            if not state.pending_date or not state.pending_time:
                self._enter_step(sender_id, Step.AWAIT_DATE, now)
                return replies.DATE_PROMPT
            result = await self._booking.book(
                name=message,
                day=date.fromisoformat(state.pending_date),
                time=state.pending_time,
                requester_id=sender_id,
            )
            if result.next_step is not None:
                self._enter_step(sender_id, result.next_step, now)
            return result.message

        if state.step == Step.AWAIT_CANCEL_NAME_TIME:
            tokens = message.split()
            if len(tokens) < 2:
                return replies.CANCEL_FORMAT_HINT
            client_name, time = tokens[0], tokens[1]
            if not is_valid_time(time):
                return replies.CANCEL_INVALID_FORMAT
            self._store.delete_state(sender_id)
            return await self._cancellation.cancel(client_name, now.date(), time)

        if state.step == Step.AWAIT_PRESENCE_CONFIRM:
            if lowered in CONFIRM_KEYWORDS:
                self._store.delete_state(sender_id)
                return replies.with_menu("Show! Te esperamos no horário. 😎")
            if lowered in DECLINE_KEYWORDS:
                self._store.delete_state(sender_id)
                ref = state.pending_appointment
                if ref is None:
                    return replies.build_menu()
                return await self._cancellation.cancel(ref.client_name, date.fromisoformat(ref.date), ref.time)
            return replies.PRESENCE_REPROMPT

        self._store.delete_state(sender_id)
        return replies.build_menu()

    def _enter_step(self, sender_id: str, step: Step, now: datetime) -> None:
        self._store.set_state(sender_id, ConversationState(last_contact_at=now.timestamp(), step=step))
        self._logger.info("Step entered", extra={"requester_id": sender_id, "step": step.value})
