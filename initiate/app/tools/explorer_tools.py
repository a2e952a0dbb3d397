from typing import Any, Callable, Dict, List, Optional, Sequence

from eth_utils import from_wei_decimals
from web3 import Web3

from initiate.app.models.domain.error import ToolExecutionError
from initiate.app.services.explorer_service import ExplorerService
from initiate.app.tools.base import BaseTool, ToolDefinition, object_schema
from initiate.app.utils.amounts import display_amount

DEFAULT_TOKEN_DECIMALS = 18

PostProcessor = Callable[[Dict[str, Any]], Any]

# Reusable property schemas
SORT = {
    "type": "string",
    "enum": ["asc", "desc"],
    "description": "Sort order: 'asc' for ascending, 'desc' for descending",
}
STARTBLOCK = {"type": "number", "description": "Starting block number to search from"}
ENDBLOCK = {"type": "number", "description": "Ending block number to search to"}
PAGE = {"type": "number", "description": "Page number for pagination"}


def _offset(what: str) -> Dict[str, Any]:
    return {"type": "number", "description": f"Number of {what} per page"}


def _string(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _query_value(value: Any) -> str:
    # JSON numbers may arrive as 100.0
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _transfer_properties(kind: str) -> Dict[str, Dict[str, Any]]:
    return {
        "address": _string(f"Address to get {kind} transfers for"),
        "contractaddress": _string("Token contract address to filter by"),
        "sort": SORT,
        "startblock": STARTBLOCK,
        "endblock": ENDBLOCK,
        "page": PAGE,
        "offset": _offset("transactions"),
    }


class ExplorerTool(BaseTool):
    """
    A tool backed by one explorer `module`/`action` pair.

    Only the declared fields that are present in the arguments are copied
    into the query string; absent optional fields are left out.
    """

    def __init__(
        self,
        definition: ToolDefinition,
        module: str,
        action: str,
        explorer: ExplorerService,
        post_process: Optional[PostProcessor] = None,
    ):
        self.definition = definition
        self.module = module
        self.action = action
        self.explorer = explorer
        self.post_process = post_process

    @property
    def fields(self) -> Sequence[str]:
        return list(self.definition.parameters.get("properties", {}))

    def build_params(self, arguments: Dict[str, Any]) -> Dict[str, str]:
        return {
            field: _query_value(arguments[field])
            for field in self.fields
            if arguments.get(field) is not None
        }

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        data = await self.explorer.query(
            self.module, self.action, self.build_params(arguments)
        )
        if self.post_process is None:
            return data
        return self.post_process(data)


def format_native_balance(data: Dict[str, Any]) -> str:
    """Convert the wei balance in `result` into an ether string."""
    raw = data.get("result")
    try:
        return display_amount(Web3.from_wei(int(raw), "ether"))
    except (TypeError, ValueError):
        raise ToolExecutionError(
            "get_native_token_balance",
            f"Explorer did not return a balance: {data.get('message') or raw}",
        ) from None


def _token_decimals(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return DEFAULT_TOKEN_DECIMALS


def make_token_list_formatter(icon_url_template: str) -> PostProcessor:
    """
    Replace each token entry with {name, formattedBalance, image}.

    The rest of the envelope (status, message) is kept as it came.
    """

    def format_token_list(data: Dict[str, Any]) -> Dict[str, Any]:
        tokens = data.get("result")
        if not isinstance(tokens, list):
            return data

        formatted: List[Dict[str, Any]] = []
        for token in tokens:
            formatted.append(
                {
                    "name": token.get("name"),
                    "formattedBalance": display_amount(
                        from_wei_decimals(
                            int(token.get("balance") or 0),
                            _token_decimals(token.get("decimals")),
                        )
                    ),
                    "image": icon_url_template.format(
                        address=token.get("contractAddress")
                    ),
                }
            )
        return {**data, "result": formatted}

    return format_token_list


def build_explorer_tools(
    explorer: ExplorerService, icon_url_template: str
) -> List[ExplorerTool]:
    """Create every explorer-backed tool, in the order shown to the model."""

    def tool(name, description, module, action, properties, required=None, post=None):
        return ExplorerTool(
            ToolDefinition(
                name=name,
                description=description,
                parameters=object_schema(properties, required),
            ),
            module=module,
            action=action,
            explorer=explorer,
            post_process=post,
        )

    return [
        tool(
            "get_native_token_balance",
            "Get the native token balance for an Ethereum address. "
            "Returns the balance in ether units.",
            "account",
            "balance",
            {"address": _string("The Ethereum address to get balance for")},
            ["address"],
            post=format_native_balance,
        ),
        tool(
            "get_transactions_by_address",
            "Get transactions by Ethereum address. Maximum of 10,000 "
            "transactions. For faster results, specify a smaller block range.",
            "account",
            "txlist",
            {
                "address": _string("The Ethereum address to get transactions for"),
                "sort": SORT,
                "startblock": STARTBLOCK,
                "endblock": ENDBLOCK,
                "page": PAGE,
                "offset": _offset("transactions"),
            },
            ["address"],
        ),
        tool(
            "get_erc20_token_transfers",
            "Get ERC-20 token transfer events by address (up to 10,000).",
            "account",
            "tokentx",
            _transfer_properties("ERC-20 token"),
        ),
        tool(
            "get_token_list",
            "Get list of all tokens and their balances owned by an Ethereum address.",
            "account",
            "tokenlist",
            {"address": _string("Address to get token list for")},
            ["address"],
            post=make_token_list_formatter(icon_url_template),
        ),
        tool(
            "get_erc721_token_transfers",
            "Get ERC-721 (NFT) token transfer events by address or contract.",
            "account",
            "tokennfttx",
            _transfer_properties("ERC-721"),
        ),
        tool(
            "get_erc1155_token_transfers",
            "Get ERC-1155 token transfer events by address or contract.",
            "account",
            "token1155tx",
            _transfer_properties("ERC-1155"),
        ),
        tool(
            "get_internal_transactions",
            "Get internal transactions by transaction hash or address (up to 10,000).",
            "account",
            "txlistinternal",
            {
                "txhash": _string("Transaction hash to check for internal transactions"),
                "address": _string("Address to get internal transactions for"),
                "sort": SORT,
                "startblock": STARTBLOCK,
                "endblock": ENDBLOCK,
                "page": PAGE,
                "offset": _offset("transactions"),
            },
        ),
        tool(
            "get_contract_abi",
            "Get the ABI for a verified smart contract address.",
            "contract",
            "getabi",
            {"address": _string("The contract address to get the ABI for")},
            ["address"],
        ),
        tool(
            "get_contract_source_code",
            "Get the source code for a verified smart contract address.",
            "contract",
            "getsourcecode",
            {"address": _string("The contract address to get the source code for")},
            ["address"],
        ),
        tool(
            "get_contract_creation",
            "Get the creator address and transaction hash for one or more "
            "contract addresses (up to 10).",
            "contract",
            "getcontractcreation",
            {
                "contractaddresses": _string(
                    "Comma-separated list of contract addresses (max 10)"
                )
            },
            ["contractaddresses"],
        ),
        tool(
            "get_token_info",
            "Get name, symbol, supply, decimals, and type (ERC-20/ERC-721) "
            "for a token contract address.",
            "token",
            "getToken",
            {"contractaddress": _string("The token contract address to get info for")},
            ["contractaddress"],
        ),
        tool(
            "get_token_holders",
            "Get list of token holders and their balances for a specific "
            "token contract address.",
            "token",
            "getTokenHolders",
            {
                "contractaddress": _string(
                    "The token contract address to get holders for"
                ),
                "page": PAGE,
                "offset": _offset("holders"),
            },
            ["contractaddress"],
        ),
        tool(
            "get_bridged_tokens",
            "Get list of bridged tokens (only available on chains with native bridge).",
            "token",
            "bridgedTokenList",
            {
                "chainid": {
                    "type": "number",
                    "description": "Chain ID where the original token exists",
                },
                "page": PAGE,
                "offset": _offset("tokens"),
            },
        ),
        tool(
            "get_transaction_info",
            "Get detailed information about a transaction including gas, "
            "value, logs, revert reason, and more.",
            "transaction",
            "gettxinfo",
            {
                "txhash": _string("The transaction hash to get info for"),
                "index": {"type": "number", "description": "Log index for pagination"},
            },
            ["txhash"],
        ),
        tool(
            "get_transaction_receipt_status",
            "Get transaction receipt status (0 = failed, 1 = successful).",
            "transaction",
            "gettxreceiptstatus",
            {"txhash": _string("The transaction hash to check status for")},
            ["txhash"],
        ),
        tool(
            "get_transaction_error_status",
            "Get error status and description for a transaction.",
            "transaction",
            "getstatus",
            {"txhash": _string("The transaction hash to check for errors")},
            ["txhash"],
        ),
    ]
