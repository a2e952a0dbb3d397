import pytest

from initiate.app.models.domain.conversation import (
    ToolCallRequest,
    ToolCallResult,
)
from initiate.app.models.domain.error import InvalidToolArgumentsError, UpstreamAPIError
from tests.factories import tool_call


def test_tool_call_round_trips_openai_shape():
    raw = tool_call("call_1", "get_token_list", {"address": "0xabc"})

    request = ToolCallRequest.from_dict(raw)

    assert request.id == "call_1"
    assert request.name == "get_token_list"
    assert request.parse_arguments() == {"address": "0xabc"}
    assert request.to_dict() == raw


def test_empty_arguments_parse_as_empty_object():
    request = ToolCallRequest.from_dict(
        {"id": "call_1", "function": {"name": "get_gas_price", "arguments": ""}}
    )

    assert request.parse_arguments() == {}


@pytest.mark.parametrize("arguments", ["{oops", "[1, 2]", '"text"'])
def test_non_object_arguments_are_rejected(arguments):
    request = ToolCallRequest(id="call_1", name="echo", raw_arguments=arguments)

    with pytest.raises(InvalidToolArgumentsError):
        request.parse_arguments()


def test_object_arguments_are_serialised():
    request = ToolCallRequest.from_dict(
        {"id": "call_1", "function": {"name": "echo", "arguments": {"value": "x"}}}
    )

    assert request.raw_arguments == '{"value": "x"}'
    assert request.parse_arguments() == {"value": "x"}


@pytest.mark.parametrize(
    "entry",
    [
        {"id": None, "function": {"name": "echo", "arguments": "{}"}},
        {"function": {"name": None}},
        {"id": "call_1", "function": "echo"},
        "not a tool call",
    ],
)
def test_malformed_entries_still_build_a_request(entry):
    request = ToolCallRequest.from_dict(entry)

    assert isinstance(request.id, str)
    assert isinstance(request.name, str)
    assert request.parse_arguments() == {}


def test_array_arguments_fail_only_when_parsed():
    request = ToolCallRequest.from_dict(
        {"id": "call_1", "function": {"name": "echo", "arguments": [1, 2]}}
    )

    assert request.raw_arguments == "[1, 2]"
    with pytest.raises(InvalidToolArgumentsError):
        request.parse_arguments()


def test_tool_result_message():
    result = ToolCallResult(tool_call_id="call_1", tool_name="echo", content="{}")

    assert result.to_message() == {
        "tool_call_id": "call_1",
        "role": "tool",
        "name": "echo",
        "content": "{}",
    }


def test_upstream_error_defaults_to_bad_gateway():
    error = UpstreamAPIError("Blockchain explorer", None, "timed out")

    assert error.status_code == 502
    assert error.to_dict() == {
        "success": False,
        "error": "Blockchain explorer request failed: timed out",
    }
