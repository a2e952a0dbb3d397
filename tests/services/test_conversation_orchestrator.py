import json
import logging

import pytest
from unittest.mock import AsyncMock, MagicMock

from initiate.app.models.domain.error import OrchestrationError, UpstreamAPIError
from initiate.app.services.conversation_orchestrator import ConversationOrchestrator
from initiate.app.tools.explorer_tools import build_explorer_tools
from initiate.app.tools.registry import ToolRegistry
from tests.factories import EchoTool, FailingTool, chat_response, tool_call

USER_MESSAGES = [{"role": "user", "content": "what's my balance"}]


def make_chat(*responses):
    chat = MagicMock()
    chat.completions = AsyncMock(side_effect=list(responses))
    return chat


def sent_messages(chat, call_index):
    return chat.completions.await_args_list[call_index].args[0]


@pytest.mark.asyncio
async def test_no_tool_calls_means_single_chat_call():
    chat = make_chat(chat_response("Hello there"))
    orchestrator = ConversationOrchestrator(chat, ToolRegistry([EchoTool()]))

    result = await orchestrator.run(USER_MESSAGES)

    assert chat.completions.await_count == 1
    assert result.chat_calls == 1
    assert result.final_content == "Hello there"
    assert result.tool_calls == []
    assert result.tool_results == []
    assert result.data == chat_response("Hello there")


@pytest.mark.asyncio
async def test_every_request_carries_the_full_tool_schema():
    registry = ToolRegistry([EchoTool()])
    chat = make_chat(
        chat_response(tool_calls=[tool_call("call_1", "echo", {"value": "x"})]),
        chat_response("done"),
    )

    await ConversationOrchestrator(chat, registry).run(USER_MESSAGES)

    for call in chat.completions.await_args_list:
        assert call.args[1] == registry.openai_tools()


@pytest.mark.asyncio
async def test_system_prompt_is_prepended():
    chat = make_chat(chat_response("ok"))
    orchestrator = ConversationOrchestrator(
        chat, ToolRegistry([EchoTool()]), system_prompt="Be brief"
    )

    await orchestrator.run(USER_MESSAGES)

    assert sent_messages(chat, 0) == [
        {"role": "system", "content": "Be brief"},
        *USER_MESSAGES,
    ]


@pytest.mark.asyncio
async def test_tool_results_are_paired_by_id():
    # The first call finishes last
    registry = ToolRegistry([EchoTool("slow", delay=0.05), EchoTool("fast")])
    calls = [
        tool_call("call_slow", "slow", {"value": "a"}),
        tool_call("call_fast", "fast", {"value": "b"}),
    ]
    chat = make_chat(chat_response(tool_calls=calls), chat_response("both done"))

    result = await ConversationOrchestrator(chat, registry).run(USER_MESSAGES)

    assert chat.completions.await_count == 2
    assert result.chat_calls == 2
    assert result.final_content == "both done"
    by_id = {r.tool_call_id: json.loads(r.content) for r in result.tool_results}
    assert by_id == {"call_slow": {"echo": "a"}, "call_fast": {"echo": "b"}}

    first, second = sent_messages(chat, 0), sent_messages(chat, 1)
    assert len(second) == len(first) + 1 + len(calls)
    assert second[len(first)]["tool_calls"] == calls
    assert [m["role"] for m in second[len(first) + 1:]] == ["tool", "tool"]
    assert {m["tool_call_id"] for m in second[len(first) + 1:]} == {
        "call_slow",
        "call_fast",
    }


@pytest.mark.asyncio
async def test_partial_failure_still_completes():
    registry = ToolRegistry(
        [
            EchoTool(),
            FailingTool(UpstreamAPIError("Blockchain explorer", 503, "down")),
        ]
    )
    chat = make_chat(
        chat_response(
            tool_calls=[
                tool_call("call_ok", "echo", {"value": "fine"}),
                tool_call("call_bad", "broken", {}),
            ]
        ),
        chat_response("One lookup failed"),
    )

    result = await ConversationOrchestrator(chat, registry).run(USER_MESSAGES)

    assert result.final_content == "One lookup failed"
    results = {r.tool_call_id: r for r in result.tool_results}
    assert results["call_ok"].ok is True
    assert json.loads(results["call_ok"].content) == {"echo": "fine"}
    assert results["call_bad"].ok is False
    assert json.loads(results["call_bad"].content) == {
        "error": "Blockchain explorer request failed with status 503"
    }


@pytest.mark.asyncio
async def test_unknown_tool_becomes_error_result():
    chat = make_chat(
        chat_response(tool_calls=[tool_call("call_1", "launch_rocket", {})]),
        chat_response("I can't do that"),
    )

    result = await ConversationOrchestrator(chat, ToolRegistry([EchoTool()])).run(
        USER_MESSAGES
    )

    assert result.tool_results[0].tool_name == "launch_rocket"
    assert json.loads(result.tool_results[0].content) == {
        "error": "Unknown tool: launch_rocket"
    }
    assert sent_messages(chat, 1)[-1]["tool_call_id"] == "call_1"


@pytest.mark.asyncio
async def test_bad_arguments_become_error_results():
    chat = make_chat(
        chat_response(
            tool_calls=[
                tool_call("call_json", "echo", "{not json"),
                tool_call("call_missing", "echo", {}),
            ]
        ),
        chat_response("Sorry"),
    )

    result = await ConversationOrchestrator(chat, ToolRegistry([EchoTool()])).run(
        USER_MESSAGES
    )

    assert [r.ok for r in result.tool_results] == [False, False]
    assert "Invalid JSON" in json.loads(result.tool_results[0].content)["error"]
    assert "value" in json.loads(result.tool_results[1].content)["error"]


@pytest.mark.asyncio
async def test_object_arguments_are_accepted_alongside_string_arguments():
    object_call = {
        "id": "call_obj",
        "type": "function",
        "function": {"name": "echo", "arguments": {"value": "b"}},
    }
    chat = make_chat(
        chat_response(
            tool_calls=[tool_call("call_str", "echo", {"value": "a"}), object_call]
        ),
        chat_response("Both echoed"),
    )

    result = await ConversationOrchestrator(chat, ToolRegistry([EchoTool()])).run(
        USER_MESSAGES
    )

    assert result.chat_calls == 2
    assert result.final_content == "Both echoed"
    assert [r.tool_call_id for r in result.tool_results] == ["call_str", "call_obj"]
    assert [json.loads(r.content) for r in result.tool_results] == [
        {"echo": "a"},
        {"echo": "b"},
    ]


@pytest.mark.asyncio
async def test_malformed_tool_call_entries_become_error_results():
    chat = make_chat(
        chat_response(
            tool_calls=[
                tool_call("call_ok", "echo", {"value": "a"}),
                {"id": None, "function": {"name": "echo", "arguments": [1, 2]}},
                {"id": "call_nameless", "function": None},
            ]
        ),
        chat_response("Partly done"),
    )

    result = await ConversationOrchestrator(chat, ToolRegistry([EchoTool()])).run(
        USER_MESSAGES
    )

    assert result.chat_calls == 2
    assert [r.ok for r in result.tool_results] == [True, False, False]
    assert result.tool_results[1].tool_call_id == ""
    assert "JSON object" in json.loads(result.tool_results[1].content)["error"]
    assert json.loads(result.tool_results[2].content) == {"error": "Unknown tool: "}
    assert len(sent_messages(chat, 1)) == len(USER_MESSAGES) + 4


@pytest.mark.asyncio
async def test_balance_question_end_to_end():
    explorer = MagicMock()
    explorer.query = AsyncMock(
        return_value={"status": "1", "message": "OK", "result": "500000000000000"}
    )
    registry = ToolRegistry(
        build_explorer_tools(explorer, "https://icons.test/{address}.png")
    )
    address = "0xC039654Bf76d6aF77A851c26167FBf07405C59BA"
    chat = make_chat(
        chat_response(
            tool_calls=[
                tool_call("call_1", "get_native_token_balance", {"address": address})
            ]
        ),
        chat_response("Your balance is 0.0005 ETH."),
    )

    result = await ConversationOrchestrator(chat, registry).run(USER_MESSAGES)

    assert json.loads(result.tool_results[0].content) == "0.0005"
    assert "0.0005" in result.final_content
    explorer.query.assert_awaited_once_with("account", "balance", {"address": address})


@pytest.mark.asyncio
async def test_second_response_tool_calls_are_ignored(caplog):
    chat = make_chat(
        chat_response(tool_calls=[tool_call("call_1", "echo", {"value": "a"})]),
        chat_response(
            "partial answer",
            tool_calls=[tool_call("call_2", "echo", {"value": "b"})],
        ),
    )

    with caplog.at_level(logging.WARNING):
        result = await ConversationOrchestrator(chat, ToolRegistry([EchoTool()])).run(
            USER_MESSAGES
        )

    assert chat.completions.await_count == 2
    assert result.final_content == "partial answer"
    assert [tc.id for tc in result.tool_calls] == ["call_1"]
    assert "Ignoring 1 tool call" in caplog.text


@pytest.mark.asyncio
async def test_first_pass_failure_is_fatal():
    chat = make_chat(UpstreamAPIError("Chat completion API", 500, "boom"))

    with pytest.raises(UpstreamAPIError):
        await ConversationOrchestrator(chat, ToolRegistry([EchoTool()])).run(
            USER_MESSAGES
        )


@pytest.mark.asyncio
async def test_second_pass_failure_is_fatal():
    chat = make_chat(
        chat_response(tool_calls=[tool_call("call_1", "echo", {"value": "a"})]),
        UpstreamAPIError("Chat completion API", 502, "bad gateway"),
    )

    with pytest.raises(UpstreamAPIError) as exc:
        await ConversationOrchestrator(chat, ToolRegistry([EchoTool()])).run(
            USER_MESSAGES
        )

    assert exc.value.status_code == 502


@pytest.mark.asyncio
async def test_response_without_choices_raises():
    chat = make_chat({"error": "weird"})

    with pytest.raises(OrchestrationError):
        await ConversationOrchestrator(chat, ToolRegistry([EchoTool()])).run(
            USER_MESSAGES
        )
