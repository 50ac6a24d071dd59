"""
Tests for the freeform chat with the barber and its idle expiry.
"""

from __future__ import annotations

import pytest

from barberbot.application.utils import replies

CLIENT_ID = "5511999990000@c.us"
MENU = replies.build_menu()


@pytest.mark.asyncio
async def test_option_six_opens_side_chat_and_bot_stays_quiet(core, store):
    """While chatting with the barber the bot answers nothing."""
    use_case = core.handle_incoming_message

    assert await use_case.handle(CLIENT_ID, "6") == replies.SIDE_CHAT_WELCOME
    assert core.side_conversation.is_active(CLIENT_ID)

    # Menu digits and commands go to the barber, not the bot
    assert await use_case.handle(CLIENT_ID, "1") is None
    assert await use_case.handle(CLIENT_ID, "relatorio") is None
    assert store.get_state(CLIENT_ID) is None


@pytest.mark.asyncio
async def test_exit_keyword_closes_side_chat(core):
    """The exit keyword closes the side chat and restores the menu."""
    use_case = core.handle_incoming_message
    await use_case.handle(CLIENT_ID, "6")

    assert await use_case.handle(CLIENT_ID, "Sair") == replies.with_menu(replies.SIDE_CHAT_EXIT)
    assert not core.side_conversation.is_active(CLIENT_ID)
    assert await use_case.handle(CLIENT_ID, "1") == replies.DATE_PROMPT


@pytest.mark.asyncio
async def test_idle_side_chat_is_closed_once(core, clock, sent_to):
    """An idle side chat is closed and announced exactly once."""
    use_case = core.handle_incoming_message
    await use_case.handle(CLIENT_ID, "6")

    clock.advance(minutes=6)
    await use_case.handle(CLIENT_ID, "alguém aí?")
    clock.advance(minutes=6)
    assert (await core.sweep_idle_sessions.execute()).expired_side_sessions == []

    clock.advance(minutes=2)
    first = await core.sweep_idle_sessions.execute()
    clock.advance(minutes=5)
    second = await core.sweep_idle_sessions.execute()

    assert first.expired_side_sessions == [CLIENT_ID]
    assert second.expired_side_sessions == []
    idle_notice = replies.with_menu(replies.SIDE_CHAT_IDLE)
    assert sent_to(CLIENT_ID).count(idle_notice) == 1
    assert not core.side_conversation.is_active(CLIENT_ID)


@pytest.mark.asyncio
async def test_side_chat_closed_by_user_is_not_reported_idle(core, clock, sent_to):
    """A side chat the requester already left is not expired later."""
    use_case = core.handle_incoming_message
    await use_case.handle(CLIENT_ID, "6")
    await use_case.handle(CLIENT_ID, "sair")

    clock.advance(minutes=30)
    result = await core.sweep_idle_sessions.execute()

    assert result.expired_side_sessions == []
    assert sent_to(CLIENT_ID) == []
