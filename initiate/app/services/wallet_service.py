import logging
from typing import Any, Dict, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_wei_decimals
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from initiate.app.config.settings import Settings
from initiate.app.models.domain.error import MissingCredentialError

logger = logging.getLogger(__name__)

ERC20_ABI = [
    {
        "name": "transfer",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "name": "decimals",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
    },
]


class WalletService:
    """
    Signs and broadcasts transactions against the configured JSON-RPC node.

    Sends return as soon as the node accepts the raw transaction; there is
    no receipt wait, nonce management or replacement logic.
    """

    def __init__(self, settings: Settings, web3: Optional[AsyncWeb3] = None):
        self.private_key = settings.WALLET_PRIVATE_KEY
        self.w3 = web3 or AsyncWeb3(AsyncHTTPProvider(settings.RPC_URL))

    def account(self) -> LocalAccount:
        if not self.private_key:
            raise MissingCredentialError("WALLET_PRIVATE_KEY")
        return Account.from_key(self.private_key)

    async def get_fee_data(self) -> Dict[str, Optional[int]]:
        """Current gas price plus EIP-1559 fee caps, all in wei."""
        gas_price = await self.w3.eth.gas_price
        block = await self.w3.eth.get_block("latest")
        base_fee = block.get("baseFeePerGas")

        max_fee_per_gas = None
        max_priority_fee_per_gas = None
        if base_fee is not None:
            max_priority_fee_per_gas = await self.w3.eth.max_priority_fee
            max_fee_per_gas = base_fee * 2 + max_priority_fee_per_gas

        return {
            "gas_price": gas_price,
            "max_fee_per_gas": max_fee_per_gas,
            "max_priority_fee_per_gas": max_priority_fee_per_gas,
        }

    async def estimate_gas(self, to: str, data: Optional[str] = None) -> Dict[str, int]:
        account = self.account()
        tx: Dict[str, Any] = {
            "from": account.address,
            "to": Web3.to_checksum_address(to),
        }
        if data:
            tx["data"] = data

        gas = await self.w3.eth.estimate_gas(tx)
        gas_price = await self.w3.eth.gas_price
        return {"gas": gas, "gas_price": gas_price, "cost": gas * gas_price}

    async def send_native(self, to: str, amount: str) -> Dict[str, Any]:
        account = self.account()
        recipient = Web3.to_checksum_address(to)
        value = Web3.to_wei(amount, "ether")

        tx: Dict[str, Any] = {
            "to": recipient,
            "value": value,
            "nonce": await self.w3.eth.get_transaction_count(account.address),
            "chainId": await self.w3.eth.chain_id,
            "gasPrice": await self.w3.eth.gas_price,
        }
        tx["gas"] = await self.w3.eth.estimate_gas(
            {"from": account.address, "to": recipient, "value": value}
        )

        tx_hash = await self._sign_and_send(account, tx)
        logger.info(f"Native transfer broadcast: {tx_hash}")
        return {"hash": tx_hash, "from": account.address}

    async def send_erc20(
        self, contract_address: str, to: str, amount: str
    ) -> Dict[str, Any]:
        account = self.account()
        contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(contract_address), abi=ERC20_ABI
        )

        decimals = await contract.functions.decimals().call()
        raw_amount = to_wei_decimals(amount, decimals)

        tx = await contract.functions.transfer(
            Web3.to_checksum_address(to), raw_amount
        ).build_transaction(
            {
                "from": account.address,
                "nonce": await self.w3.eth.get_transaction_count(account.address),
                "chainId": await self.w3.eth.chain_id,
            }
        )
        tx.pop("from", None)

        tx_hash = await self._sign_and_send(account, tx)
        logger.info(f"ERC-20 transfer broadcast: {tx_hash}")
        return {"hash": tx_hash, "from": account.address}

    async def _sign_and_send(self, account: LocalAccount, tx: Dict[str, Any]) -> str:
        signed = account.sign_transaction(tx)
        tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)
