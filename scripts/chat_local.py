#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no WhatsApp gateway).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps a stable requester id for the session (must look like a direct chat id)
- Sends your typed messages through the same HandleIncomingMessageUseCase
- Prints the reply plus anything the bot sent out-of-band (confirmations, admin notifications)
- Uses in-memory state and appointments, so nothing is persisted
"""

from __future__ import annotations

import asyncio
import os
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from barberbot.application.utils.clock import business_clock
from barberbot.core.config import settings
from barberbot.infrastructure.store.memory_repository import MemoryAppointmentRepository
from barberbot.infrastructure.store.memory_state_store import MemoryStateStore
from barberbot.infrastructure.whatsapp.mock_platform import MockMessagingPlatform
from barberbot.wiring.dependencies import build_core


def _print_header(requester_id: str) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"requester_id: {requester_id}")
    print("Type your message and press Enter.")
    print("Commands: /new, /admin, /sweep, /today, /tomorrow, /retention, /quit, /help")
    print("-" * 60)


def _flush_outbound(platform: MockMessagingPlatform) -> None:
    for recipient_id, text in platform.sent:
        print(f"\n[sent to {recipient_id}]\n{text}")
    platform.sent.clear()


async def main() -> None:
    requester_id = os.getenv("CHAT_REQUESTER_ID", f"5500000000001{settings.ALLOWED_SENDER_SUFFIX}")
    platform = MockMessagingPlatform()
    config = settings.model_copy(update={"OUTBOUND_ENABLED": True})
    core = build_core(
        store=MemoryStateStore(),
        repository=MemoryAppointmentRepository(),
        platform=platform,
        clock=business_clock(config.BUSINESS_TIMEZONE),
        config=config,
    )
    _print_header(requester_id)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /new       -> start as a new requester")
            print("  /admin     -> talk as the admin identity")
            print("  /sweep     -> run the idle-session sweep now")
            print("  /today     -> run same-day reminders")
            print("  /tomorrow  -> run next-day reminders (arms presence confirmation)")
            print("  /retention -> run the retention sweep")
            print("  /quit      -> exit")
            continue
        if cmd == "/new":
            requester_id = f"55{int(time.time())}{settings.ALLOWED_SENDER_SUFFIX}"
            print(f"New requester_id: {requester_id}")
            continue
        if cmd == "/admin":
            requester_id = config.ADMIN_ID
            print(f"Now talking as admin: {requester_id}")
            continue
        if cmd == "/sweep":
            result = await core.sweep_idle_sessions.execute()
            print(f"expired states={result.expired_states} side sessions={result.expired_side_sessions}")
            _flush_outbound(platform)
            continue
        if cmd in ("/today", "/tomorrow", "/retention"):
            job = {
                "/today": core.reminders.run_same_day_reminders,
                "/tomorrow": core.reminders.run_next_day_reminders,
                "/retention": core.reminders.run_retention_sweep,
            }[cmd]
            print(f"{cmd[1:]}: {await job()} appointment(s)")
            _flush_outbound(platform)
            continue

        reply = await core.handle_incoming_message.handle(requester_id, user_text)
        _flush_outbound(platform)

        print("\n--- Reply ---")
        print(reply.strip() if reply else "(no reply)")
        print("-" * 60)


if __name__ == "__main__":
    asyncio.run(main())
