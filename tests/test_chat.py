from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import aiohttp
import httpx
import pytest

from botanical_friend.constants import (
    CHAT_SYSTEM_INSTRUCTION,
    CHAT_WELCOME_MESSAGE_ID,
    MSG_CHAT_FAILED,
    MSG_SERVICE_UNAVAILABLE,
)
from botanical_friend.exceptions import ChatTurnError, ChatTurnInProgressError, ConfigurationError
from botanical_friend.extensions.app_context import AppContext, create_app_context
from botanical_friend.modules.chatbot.schemas import ChatMessage
from botanical_friend.modules.chatbot.session import ChatSessionManager
from botanical_friend.modules.chatbot.transcript import append_delta
from botanical_friend.shared.enums import ChatRole, ChatTurnState
from tests.fakes import FakeChat, FakeGenaiClient, wait_until


def model_messages(context: AppContext) -> list[ChatMessage]:
    return [
        m
        for m in context.chat.transcript.messages
        if m.role == ChatRole.MODEL and m.id != CHAT_WELCOME_MESSAGE_ID
    ]


def test_session_created_once_at_startup(fake_client: FakeGenaiClient, context: AppContext) -> None:
    created = fake_client.aio.chats.created
    assert len(created) == 1
    assert created[0]["config"].system_instruction == CHAT_SYSTEM_INSTRUCTION

    session = context.chat.session_manager.create_session()
    assert session is fake_client.aio.chats.chat
    assert len(created) == 1


def test_transcript_starts_with_welcome_message(context: AppContext) -> None:
    messages = context.chat.transcript.messages
    assert len(messages) == 1
    assert messages[0].id == CHAT_WELCOME_MESSAGE_ID
    assert messages[0].role == ChatRole.MODEL


def test_append_delta_is_pure() -> None:
    now = datetime.now(timezone.utc)
    messages = [
        ChatMessage(id="a", role=ChatRole.USER, text="מה שלום הפיקוס?", timestamp=now),
        ChatMessage(id="b", role=ChatRole.MODEL, text="שלום", timestamp=now),
    ]
    updated = append_delta(messages, "b", " עולם")

    assert [m.id for m in updated] == ["a", "b"]
    assert updated[1].text == "שלום עולם"
    assert updated[0] is messages[0]
    assert messages[1].text == "שלום"


@pytest.mark.asyncio()
async def test_streamed_reply_is_one_message(context: AppContext, fake_chat: FakeChat) -> None:
    fake_chat.replies = [["שלום", " עולם"]]

    updates = [m async for m in context.chat.send("היי")]

    replies = model_messages(context)
    assert len(replies) == 1
    assert replies[0].text == "שלום עולם"
    assert not replies[0].is_error
    # every update of the reply keeps its identity
    assert {m.id for m in updates if m.role == ChatRole.MODEL} == {replies[0].id}
    assert [m.text for m in updates if m.role == ChatRole.MODEL] == ["", "שלום", "שלום עולם"]
    assert fake_chat.sent == ["היי"]
    assert not context.chat.loading


@pytest.mark.asyncio()
async def test_user_message_is_trimmed_and_logged_first(
    context: AppContext, fake_chat: FakeChat
) -> None:
    fake_chat.replies = [["בשמחה"]]
    _ = [m async for m in context.chat.send("  איך משקים קקטוס?  ")]

    user_message = context.chat.transcript.messages[1]
    assert user_message.role == ChatRole.USER
    assert user_message.text == "איך משקים קקטוס?"
    assert context.chat.transcript.messages[2].text == "בשמחה"


@pytest.mark.asyncio()
async def test_blank_message_is_ignored(context: AppContext, fake_chat: FakeChat) -> None:
    updates = [m async for m in context.chat.send("   ")]
    assert updates == []
    assert fake_chat.sent == []
    assert len(context.chat.transcript.messages) == 1


@pytest.mark.asyncio()
async def test_failure_before_stream(context: AppContext, fake_chat: FakeChat) -> None:
    fake_chat.replies = [aiohttp.ClientConnectionError("Network is unreachable"), ["עדיין כאן"]]

    updates = [m async for m in context.chat.send("שאלה")]

    replies = model_messages(context)
    assert len(replies) == 1
    assert replies[0].is_error
    assert replies[0].text == MSG_CHAT_FAILED
    assert updates[-1] == replies[0]

    # the session survives the failed turn
    _ = [m async for m in context.chat.send("שאלה נוספת")]
    replies = model_messages(context)
    assert [m.text for m in replies] == [MSG_CHAT_FAILED, "עדיין כאן"]
    assert fake_chat.sent == ["שאלה", "שאלה נוספת"]


@pytest.mark.asyncio()
async def test_failure_during_stream(context: AppContext, fake_chat: FakeChat) -> None:
    fake_chat.replies = [["השקיה ", asyncio.TimeoutError()]]

    _ = [m async for m in context.chat.send("מתי להשקות?")]

    replies = model_messages(context)
    assert [m.text for m in replies] == ["השקיה ", MSG_CHAT_FAILED]
    assert [m.is_error for m in replies] == [False, True]
    assert not context.chat.loading
    assert context.chat.session_manager.turn_state == ChatTurnState.IDLE


@pytest.mark.asyncio()
async def test_send_while_streaming_is_ignored(context: AppContext, fake_chat: FakeChat) -> None:
    fake_chat.replies = [["ראשון", " שני"], ["לא אמור להישלח"]]
    fake_chat.gate = asyncio.Event()

    first_turn = asyncio.create_task(_collect(context, "הודעה ראשונה"))
    await wait_until(lambda: context.chat.session_manager.turn_state == ChatTurnState.STREAMING)
    assert context.chat.loading

    assert [m async for m in context.chat.send("הודעה שנייה")] == []

    fake_chat.gate.set()
    await first_turn

    assert fake_chat.sent == ["הודעה ראשונה"]
    assert [m.text for m in model_messages(context)] == ["ראשון שני"]
    assert not context.chat.loading


@pytest.mark.asyncio()
async def test_abandoned_stream_does_not_block_next_turn(
    context: AppContext, fake_chat: FakeChat
) -> None:
    fake_chat.replies = [["חלק", " שלא יגיע"], ["תשובה מלאה"]]

    stream = context.chat.send("שאלה ארוכה")
    async for message in stream:
        if message.role == ChatRole.MODEL and message.text:
            break
    await stream.aclose()

    # the provider stream is released right away, not on garbage collection
    assert fake_chat.closed_streams == 1
    assert not context.chat.loading
    assert context.chat.session_manager.turn_state == ChatTurnState.IDLE

    _ = [m async for m in context.chat.send("שאלה קצרה")]
    assert [m.text for m in model_messages(context)] == ["חלק", "תשובה מלאה"]


@pytest.mark.asyncio()
async def test_session_manager_rejects_overlapping_turns(
    fake_client: FakeGenaiClient, fake_chat: FakeChat
) -> None:
    fake_chat.replies = [["א", "ב"], ["ג"]]
    session_manager = ChatSessionManager(client=fake_client)  # type: ignore[arg-type]
    session_manager.create_session()

    first = session_manager.send_turn("ראשונה")
    assert await first.__anext__() == "א"
    assert session_manager.turn_state == ChatTurnState.STREAMING

    with pytest.raises(ChatTurnInProgressError):
        await session_manager.send_turn("שנייה").__anext__()

    assert [fragment async for fragment in first] == ["ב"]
    assert session_manager.turn_state == ChatTurnState.IDLE


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "reply",
    [
        aiohttp.ClientConnectionError("Cannot connect to host"),
        ["שלום", aiohttp.ClientPayloadError("Response payload is not completed")],
        ["שלום", asyncio.TimeoutError()],
        httpx.ConnectError("refused"),
    ],
)
async def test_session_manager_translates_provider_errors(
    fake_client: FakeGenaiClient, fake_chat: FakeChat, reply: list[str | Exception] | Exception
) -> None:
    fake_chat.replies = [reply]
    session_manager = ChatSessionManager(client=fake_client)  # type: ignore[arg-type]
    session_manager.create_session()

    with pytest.raises(ChatTurnError):
        _ = [fragment async for fragment in session_manager.send_turn("שאלה")]
    assert session_manager.turn_state == ChatTurnState.IDLE


@pytest.mark.asyncio()
async def test_chat_without_client() -> None:
    session_manager = ChatSessionManager(client=None)
    assert session_manager.create_session() is None
    with pytest.raises(ConfigurationError):
        _ = [fragment async for fragment in session_manager.send_turn("שאלה")]


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "reply", [ValueError("Unexpected response shape"), ["חלק", KeyError("candidates")]]
)
async def test_unexpected_error_ends_turn_with_error_message(
    context: AppContext, fake_chat: FakeChat, reply: list[str | Exception] | Exception
) -> None:
    fake_chat.replies = [reply]

    updates = [m async for m in context.chat.send("שאלה")]

    assert updates[-1].is_error
    assert updates[-1].text == MSG_CHAT_FAILED
    replies = model_messages(context)
    # an empty placeholder does not survive, partial text does
    assert all(m.text for m in replies)
    assert replies[-1] == updates[-1]
    assert not context.chat.loading
    assert context.chat.session_manager.turn_state == ChatTurnState.IDLE


@pytest.mark.asyncio()
async def test_chat_without_api_key() -> None:
    context = create_app_context(client=None)

    updates = [m async for m in context.chat.send("איך לגזום ורדים?")]

    assert [(m.role, m.is_error) for m in updates] == [
        (ChatRole.USER, False),
        (ChatRole.MODEL, False),
        (ChatRole.MODEL, True),
    ]
    messages = context.chat.transcript.messages
    assert [(m.role, m.is_error) for m in messages[1:]] == [
        (ChatRole.USER, False),
        (ChatRole.MODEL, True),
    ]
    assert messages[-1].text == MSG_SERVICE_UNAVAILABLE
    assert not context.chat.loading


async def _collect(context: AppContext, text: str) -> list[ChatMessage]:
    return [m async for m in context.chat.send(text)]
