import asyncio
import types

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

from hotelbot.channels import telegram
from hotelbot.channels.telegram import (
    AGENT_GAVE_UP_REPLY,
    MAX_HISTORY_MESSAGES,
    MAX_TOOL_ROUNDS,
    _coerce_int_arguments,
    _trim_history,
    handle_message_with_agent,
    escape_markdown_v2,
    parse_checkin_args,
    parse_update_args,
)
from hotelbot.services import Registry
from hotelbot.tools import set_registry


class TestCheckinArgs:

    def test_full_command(self):
        kwargs = parse_checkin_args(["123456789", "5", "ana@x.com", "pix", "Ana", "Maria", "Souza"])
        assert kwargs == {
            "guest_id": "123456789",
            "room": "5",
            "email": "ana@x.com",
            "payment_method": "pix",
            "name": "Ana Maria Souza",
        }

    def test_missing_arguments(self):
        with pytest.raises(ValueError, match="Usage: /checkin"):
            parse_checkin_args(["123456789", "5", "ana@x.com"])


class TestUpdateArgs:

    def test_fields_with_spaces(self):
        guest_id, fields = parse_update_args(["123456789", "name=Ana", "Maria", "room=7", "payment=cash"])
        assert guest_id == "123456789"
        assert fields == {"name": "Ana Maria", "room": "7", "payment_method": "cash"}

    def test_new_id(self):
        _, fields = parse_update_args(["111111111", "id=222222222"])
        assert fields == {"new_guest_id": "222222222"}

    def test_unknown_field(self):
        with pytest.raises(ValueError, match="Unknown field 'phone'"):
            parse_update_args(["123456789", "phone=123"])

    def test_value_without_field(self):
        with pytest.raises(ValueError, match="Usage: /update"):
            parse_update_args(["123456789", "Ana"])

    def test_nothing_to_update(self):
        with pytest.raises(ValueError):
            parse_update_args(["123456789"])


def test_escape_markdown_v2():
    assert escape_markdown_v2("✅ Guest **123** in room 5.") == "✅ Guest *123* in room 5\\."
    assert escape_markdown_v2(None) == ""


def test_coerce_int_arguments():
    args = _coerce_int_arguments({"guest_id": "*123456789*", "room": " 7 ", "name": "Ana", "new_guest_id": "x"})
    assert args == {"guest_id": 123456789, "room": 7, "name": "Ana", "new_guest_id": "x"}


# ============================================================================
# Agent loop
# ============================================================================

class ScriptedLLM:
    """Stands in for ChatGroq: replays AIMessages in order."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = 0

    def bind_tools(self, tools):
        return self

    async def ainvoke(self, messages):
        self.calls += 1
        return self.replies.pop(0)


def rooms_call(n: int) -> AIMessage:
    return AIMessage(
        content="",
        tool_calls=[{"name": "list_available_rooms", "args": {}, "id": f"call_{n}"}],
    )


def assert_tool_messages_follow_calls(history):
    """Every ToolMessage answers a call made by the AIMessage before it."""
    pending = set()
    for message in history:
        if isinstance(message, ToolMessage):
            assert message.tool_call_id in pending
            pending.discard(message.tool_call_id)
        elif isinstance(message, AIMessage):
            pending = {call["id"] for call in message.tool_calls}
        else:
            pending = set()


@pytest.fixture
def agent_context(monkeypatch):
    set_registry(Registry())
    monkeypatch.setattr(telegram, "get_system_prompt", lambda: "You are the front desk.")
    yield types.SimpleNamespace(user_data={})
    set_registry(None)


def use_llm(monkeypatch, llm):
    monkeypatch.setattr(telegram, "get_llm", lambda: llm)


class TestAgentHistory:

    def test_tool_results_keep_their_calls_after_trimming(self, monkeypatch, agent_context):
        llm = ScriptedLLM([
            rooms_call(1), rooms_call(2), AIMessage(content="Rooms 1 to 20 are free."),
            rooms_call(3), rooms_call(4), rooms_call(5), AIMessage(content="Still 20 free rooms."),
        ])
        use_llm(monkeypatch, llm)

        assert asyncio.run(handle_message_with_agent("free rooms?", agent_context)) == "Rooms 1 to 20 are free."
        reply = asyncio.run(handle_message_with_agent("and now?", agent_context))

        history = agent_context.user_data["history"]
        assert reply == "Still 20 free rooms."
        assert isinstance(history[0], SystemMessage)
        assert isinstance(history[1], HumanMessage)
        assert history[1].content == "and now?"
        assert len(history) <= MAX_HISTORY_MESSAGES
        assert_tool_messages_follow_calls(history)

    def test_short_history_is_kept_whole(self, monkeypatch, agent_context):
        use_llm(monkeypatch, ScriptedLLM([AIMessage(content="Hello."), AIMessage(content="Bye.")]))

        asyncio.run(handle_message_with_agent("hi", agent_context))
        asyncio.run(handle_message_with_agent("bye", agent_context))

        history = agent_context.user_data["history"]
        assert [m.content for m in history[1:]] == ["hi", "Hello.", "bye", "Bye."]

    def test_gives_up_after_max_tool_rounds(self, monkeypatch, agent_context):
        llm = ScriptedLLM([rooms_call(n) for n in range(MAX_TOOL_ROUNDS)])
        use_llm(monkeypatch, llm)

        reply = asyncio.run(handle_message_with_agent("loop forever", agent_context))

        history = agent_context.user_data["history"]
        assert reply == AGENT_GAVE_UP_REPLY
        assert llm.calls == MAX_TOOL_ROUNDS
        assert isinstance(history[-1], AIMessage)
        assert history[-1].content == AGENT_GAVE_UP_REPLY
        assert isinstance(history[1], HumanMessage)
        assert len(history) <= 2 + 2 * MAX_TOOL_ROUNDS + 1
        assert_tool_messages_follow_calls(history)


class TestTrimHistory:

    def test_window_starts_at_a_human_message(self):
        history = [SystemMessage(content="sys")]
        for n in range(4):
            history += [HumanMessage(content=f"q{n}"), rooms_call(n),
                        ToolMessage(content="1, 2", tool_call_id=f"call_{n}"), AIMessage(content=f"a{n}")]

        trimmed = _trim_history(history, max_messages=10)

        assert trimmed[0] is history[0]
        assert [m.content for m in trimmed[1:] if isinstance(m, HumanMessage)] == ["q2", "q3"]
        assert_tool_messages_follow_calls(trimmed)

    def test_long_last_turn_is_kept_whole(self):
        history = [SystemMessage(content="sys"), HumanMessage(content="q")]
        for n in range(6):
            history += [rooms_call(n), ToolMessage(content="1", tool_call_id=f"call_{n}")]

        trimmed = _trim_history(history, max_messages=10)

        assert trimmed == history
