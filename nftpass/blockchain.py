"""
Blockchain interaction utilities.
"""
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_tester.exceptions import TransactionFailed
from web3 import EthereumTesterProvider, Web3
from web3.exceptions import ContractLogicError

from .artifacts import get_contract_bytecode, load_contract_abi
from .core.config import TESTER_NETWORK, NetworkConfig, settings

logger = logging.getLogger(__name__)

# Either an unlocked node account (checksum address) or a local signing account
Sender = Union[str, LocalAccount]


def get_web3(network: Union[str, NetworkConfig] = "localhost") -> Web3:
    """Get Web3 instance connected to the network's node."""
    if isinstance(network, str):
        network = settings.get_network(network)

    if network.name == TESTER_NETWORK:
        # Fresh in-memory chain with funded, unlocked accounts
        return Web3(EthereumTesterProvider())

    w3 = Web3(Web3.HTTPProvider(network.url))

    if not w3.is_connected():
        raise ConnectionError(f"Could not connect to the {network.name} network")

    return w3


def get_account(private_key: str) -> LocalAccount:
    """Get account from private key."""
    return Account.from_key(private_key)


def get_deployer(w3: Web3, network: Union[str, NetworkConfig]) -> Sender:
    """First configured signing account, or the node's first unlocked account."""
    if isinstance(network, str):
        network = settings.get_network(network)

    if network.accounts:
        return get_account(network.accounts[0])

    accounts = w3.eth.accounts
    if not accounts:
        raise ValueError(f"No accounts configured for the {network.name} network and the node has none unlocked")
    return accounts[0]


def sender_address(sender: Sender) -> str:
    if isinstance(sender, str):
        return Web3.to_checksum_address(sender)
    return sender.address


def call_function(call, sender: Optional[Sender] = None):
    """Read-only call of a bound contract function, from ``sender`` when given."""
    params = {} if sender is None else {"from": sender_address(sender)}
    try:
        return call.call(params)
    except TransactionFailed as e:
        raise ContractLogicError(str(e)) from e


def send_transaction(w3: Web3, call, sender: Sender, value: int = 0):
    """Send a contract function or constructor call and wait for its receipt.

    ``call`` is anything with ``transact``/``build_transaction`` (a bound
    contract function or ``contract.constructor(...)``). Reverts found while
    estimating gas raise ``ContractLogicError`` before anything is sent.
    """
    params = {"from": sender_address(sender)}
    if value:
        params["value"] = value

    try:
        if isinstance(sender, str):
            tx_hash = call.transact(params)
        else:
            transaction = call.build_transaction({
                **params,
                "nonce": w3.eth.get_transaction_count(sender.address),
                "gasPrice": w3.eth.gas_price,
            })
            signed_txn = sender.sign_transaction(transaction)
            tx_hash = w3.eth.send_raw_transaction(signed_txn.raw_transaction)
    except TransactionFailed as e:
        # The in-memory chain reports reverts with its own exception type
        raise ContractLogicError(str(e)) from e

    receipt = w3.eth.wait_for_transaction_receipt(tx_hash)

    if receipt.status != 1:
        raise ContractLogicError(f"Transaction {tx_hash.hex()} reverted")

    return receipt


def deploy_contract(
    w3: Web3,
    sender: Sender,
    contract_name: str,
    *args,
    build_dir: Optional[Union[str, Path]] = None,
) -> Tuple[str, list]:
    """Deploy a contract."""
    logger.info(f"Deploying {contract_name}...")

    abi = load_contract_abi(contract_name, build_dir)
    bytecode = get_contract_bytecode(contract_name, build_dir)

    contract = w3.eth.contract(abi=abi, bytecode=bytecode)
    receipt = send_transaction(w3, contract.constructor(*args), sender)

    contract_address = receipt.contractAddress
    logger.info(f"{contract_name} deployed to: {contract_address}")

    return contract_address, abi
