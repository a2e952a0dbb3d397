from typing import Any, Dict, List

from web3 import Web3

from initiate.app.models.domain.error import InvalidToolArgumentsError
from initiate.app.services.wallet_service import WalletService
from initiate.app.tools.base import BaseTool, ToolDefinition, object_schema
from initiate.app.utils.amounts import display_amount


def _gwei(value) -> Any:
    if value is None:
        return None
    return f"{display_amount(Web3.from_wei(value, 'gwei'))} Gwei"


class WalletTool(BaseTool):
    def __init__(self, wallet: WalletService):
        self.wallet = wallet

    def check_address(self, arguments: Dict[str, Any], field: str) -> str:
        value = arguments[field]
        if not isinstance(value, str) or not Web3.is_address(value):
            raise InvalidToolArgumentsError(
                self.name, f"Invalid address for '{field}': {value}"
            )
        return value

    def check_amount(self, arguments: Dict[str, Any]) -> str:
        amount = str(arguments["amount"]).strip()
        try:
            positive = Web3.to_wei(amount, "ether") > 0
        except (ArithmeticError, TypeError, ValueError):
            positive = False
        if not positive:
            raise InvalidToolArgumentsError(
                self.name, f"Amount must be a positive number: {amount!r}"
            )
        return amount


class GetGasPriceTool(WalletTool):
    definition = ToolDefinition(
        name="get_gas_price",
        description="Get current gas price in Gwei for the network.",
        parameters=object_schema({}),
    )

    async def execute(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        fees = await self.wallet.get_fee_data()
        return {
            "gasPrice": _gwei(fees["gas_price"] or 0),
            "maxFeePerGas": _gwei(fees["max_fee_per_gas"]),
            "maxPriorityFeePerGas": _gwei(fees["max_priority_fee_per_gas"]),
        }


class EstimateTransactionGasTool(WalletTool):
    definition = ToolDefinition(
        name="estimate_transaction_gas",
        description="Estimate gas cost for a transaction without executing it.",
        parameters=object_schema(
            {
                "to": {"type": "string", "description": "The recipient address"},
                "data": {
                    "type": "string",
                    "description": "Transaction data (optional, for contract calls)",
                },
            },
            ["to"],
        ),
    )

    async def execute(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        to = self.check_address(arguments, "to")
        estimate = await self.wallet.estimate_gas(to, arguments.get("data"))
        return {
            "estimatedGas": str(estimate["gas"]),
            "estimatedCost": display_amount(
                Web3.from_wei(estimate["cost"], "ether")
            ),
            "to": to,
        }


class SendNativeTokenTool(WalletTool):
    definition = ToolDefinition(
        name="send_native_token",
        description=(
            "Send native blockchain token (ETH on Ethereum, ARB on Arbitrum, "
            "etc.) to another address."
        ),
        parameters=object_schema(
            {
                "to": {
                    "type": "string",
                    "description": "The recipient address to send tokens to",
                },
                "amount": {
                    "type": "string",
                    "description": (
                        "The amount of tokens to send (in native units, "
                        "e.g., '0.1' for 0.1 ETH)"
                    ),
                },
            },
            ["to", "amount"],
        ),
    )

    async def execute(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        to = self.check_address(arguments, "to")
        amount = self.check_amount(arguments)
        sent = await self.wallet.send_native(to, amount)
        return {
            "success": True,
            "hash": sent["hash"],
            "from": sent["from"],
            "to": to,
            "amount": amount,
            "message": f"Transaction sent: {sent['hash']}. Not yet confirmed.",
        }


class SendERC20TokenTool(WalletTool):
    definition = ToolDefinition(
        name="send_erc20_token",
        description=(
            "Send ERC-20 tokens to another address. Requires token contract "
            "address, recipient, and amount."
        ),
        parameters=object_schema(
            {
                "contractAddress": {
                    "type": "string",
                    "description": "The ERC-20 token contract address",
                },
                "to": {
                    "type": "string",
                    "description": "The recipient address to send tokens to",
                },
                "amount": {
                    "type": "string",
                    "description": (
                        "The amount of tokens to send (in token units, "
                        "e.g., '100' for 100 USDC)"
                    ),
                },
            },
            ["contractAddress", "to", "amount"],
        ),
    )

    async def execute(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        contract_address = self.check_address(arguments, "contractAddress")
        to = self.check_address(arguments, "to")
        amount = self.check_amount(arguments)
        sent = await self.wallet.send_erc20(contract_address, to, amount)
        return {
            "success": True,
            "hash": sent["hash"],
            "from": sent["from"],
            "to": to,
            "contractAddress": contract_address,
            "amount": amount,
            "message": f"Token transfer sent: {sent['hash']}. Not yet confirmed.",
        }


def build_wallet_tools(wallet: WalletService) -> List[WalletTool]:
    return [
        SendNativeTokenTool(wallet),
        SendERC20TokenTool(wallet),
        GetGasPriceTool(wallet),
        EstimateTransactionGasTool(wallet),
    ]
