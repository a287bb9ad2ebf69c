from types import SimpleNamespace

import pytest
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.exceptions import ContractLogicError

from nftpass.blockchain import get_deployer, get_web3
from nftpass.core.config import NetworkConfig, settings
from nftpass.nft_pass import NFTPass


@pytest.fixture
def signer(w3, sender):
    # A key-only account, signing the way goerli and mainnet deploys do
    account = Account.create()
    tx_hash = w3.eth.send_transaction({"from": sender, "to": account.address, "value": w3.to_wei(10, "ether")})
    w3.eth.wait_for_transaction_receipt(tx_hash)
    return account


def test_deploy_and_mint_with_signing_account(w3, signer, other, build_dir):
    """
    Scenario: a local private key deploys the pass, sets a price and mints paid passes.
    Expected: raw signed transactions are mined, the signer owns the contract and the passes.
    """
    nft = NFTPass.deploy(w3, signer, "ATTPASS", "NFTPASS", "https://metadata.attic.xyz", build_dir=build_dir)
    assert nft.owner() == signer.address

    nft.set_price(w3.to_wei("0.1", "ether"))
    receipt = nft.mint(other, 2, value=w3.to_wei("0.2", "ether"))

    assert receipt.status == 1
    assert nft.balance_of(signer.address) == 2
    assert w3.eth.get_balance(nft.address) == w3.to_wei("0.2", "ether")


def test_signing_account_revert(w3, signer, other, build_dir):
    nft = NFTPass.deploy(w3, signer, "ATTPASS", "NFTPASS", "https://metadata.attic.xyz", build_dir=build_dir)
    nonce = w3.eth.get_transaction_count(signer.address)

    with pytest.raises(ContractLogicError, match="insufficient payment"):
        nft.mint(other, 2, value=w3.to_wei("0.05", "ether"))

    # Nothing was signed or sent
    assert w3.eth.get_transaction_count(signer.address) == nonce


def test_get_deployer_uses_configured_key(w3, signer):
    network = NetworkConfig(name="goerli", url="https://example.invalid", accounts=[Web3.to_hex(signer.key)])

    deployer = get_deployer(w3, network)

    assert isinstance(deployer, LocalAccount)
    assert deployer.address == signer.address


def test_get_deployer_falls_back_to_unlocked_account(w3):
    assert get_deployer(w3, NetworkConfig(name="localhost")) == w3.eth.accounts[0]


def test_get_deployer_without_accounts():
    node = SimpleNamespace(eth=SimpleNamespace(accounts=[]))

    with pytest.raises(ValueError, match="No accounts configured for the localhost network"):
        get_deployer(node, NetworkConfig(name="localhost"))


def test_get_web3_unreachable_node():
    with pytest.raises(ConnectionError, match="localhost"):
        get_web3(NetworkConfig(name="localhost", url="http://127.0.0.1:1"))


def test_get_web3_unreachable_node_by_name(monkeypatch):
    monkeypatch.setattr(settings, "LOCAL_RPC_URL", "http://127.0.0.1:1")
    monkeypatch.setattr(settings, "PRIVATE_KEY", "")

    with pytest.raises(ConnectionError):
        get_web3("localhost")


def test_get_web3_tester_chains_are_isolated():
    first = get_web3("tester")
    second = get_web3("tester")

    tx_hash = first.eth.send_transaction({"from": first.eth.accounts[0], "to": first.eth.accounts[1], "value": 1})
    first.eth.wait_for_transaction_receipt(tx_hash)

    assert first.eth.block_number == second.eth.block_number + 1
    assert second.eth.get_balance(second.eth.accounts[1]) < first.eth.get_balance(first.eth.accounts[1])
