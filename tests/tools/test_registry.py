import pytest
from unittest.mock import MagicMock

from initiate.app.config.settings import Settings
from initiate.app.models.domain.error import InvalidToolArgumentsError, UnknownToolError
from initiate.app.tools.catalogue import build_default_registry
from initiate.app.tools.registry import ToolRegistry
from tests.factories import EchoTool


def test_get_unknown_tool_raises():
    registry = ToolRegistry([EchoTool()])

    with pytest.raises(UnknownToolError) as exc:
        registry.get("does_not_exist")

    assert exc.value.message == "Unknown tool: does_not_exist"
    assert exc.value.tool_name == "does_not_exist"


def test_duplicate_registration_is_rejected():
    registry = ToolRegistry([EchoTool()])

    with pytest.raises(ValueError):
        registry.register(EchoTool())


def test_openai_tools_keep_registration_order():
    registry = ToolRegistry([EchoTool("b"), EchoTool("a")])

    schemas = registry.openai_tools()

    assert [s["function"]["name"] for s in schemas] == ["b", "a"]
    assert schemas[0]["type"] == "function"
    assert schemas[0]["function"]["parameters"]["required"] == ["value"]
    # Same list on every call
    assert registry.openai_tools() == schemas


@pytest.mark.asyncio
async def test_execute_dispatches_by_name():
    registry = ToolRegistry([EchoTool()])

    assert await registry.execute("echo", {"value": "hi"}) == {"echo": "hi"}


@pytest.mark.asyncio
async def test_execute_unknown_tool_raises():
    registry = ToolRegistry([EchoTool()])

    with pytest.raises(UnknownToolError):
        await registry.execute("nope", {})


@pytest.mark.asyncio
async def test_missing_required_argument_fails_before_execution():
    registry = ToolRegistry([EchoTool()])

    with pytest.raises(InvalidToolArgumentsError) as exc:
        await registry.execute("echo", {"value": ""})

    assert "value" in exc.value.message


def test_default_registry_without_wallet_tools(settings: Settings):
    settings.ENABLE_WALLET_TOOLS = False

    registry = build_default_registry(settings, explorer=MagicMock())

    assert len(registry) == 16
    assert registry.names()[0] == "get_native_token_balance"
    assert "send_native_token" not in registry


def test_default_registry_with_wallet_tools(settings: Settings):
    registry = build_default_registry(
        settings, explorer=MagicMock(), wallet=MagicMock()
    )

    assert len(registry) == 20
    for name in (
        "send_native_token",
        "send_erc20_token",
        "get_gas_price",
        "estimate_transaction_gas",
    ):
        assert name in registry
    assert len(set(registry.names())) == len(registry)
