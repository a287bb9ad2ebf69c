import pytest
from web3 import EthereumTesterProvider, Web3

from nftpass.artifacts import load_contract_abi
from nftpass.compiler import compile_contracts
from nftpass.mock_contract import deploy_mock_contract
from nftpass.nft_pass import NFTPass


@pytest.fixture(scope="session")
def build_dir(tmp_path_factory):
    # Compile once per session into a throwaway build dir
    path = tmp_path_factory.mktemp("build")
    compile_contracts(build_dir=path)
    return path


@pytest.fixture
def w3():
    # Fresh in-memory chain for every test
    return Web3(EthereumTesterProvider())


@pytest.fixture
def sender(w3):
    return w3.eth.accounts[0]


@pytest.fixture
def other(w3):
    return w3.eth.accounts[1]


@pytest.fixture
def mock_erc721(w3, sender, build_dir):
    return deploy_mock_contract(w3, sender, load_contract_abi("IERC721", build_dir), build_dir=build_dir)


@pytest.fixture
def contract(w3, sender, build_dir):
    return NFTPass.deploy(w3, sender, "ATTPASS", "NFTPASS", "https://metadata.attic.xyz", build_dir=build_dir)
