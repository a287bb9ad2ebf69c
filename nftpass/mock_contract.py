"""
Mock contracts for tests.

``deploy_mock_contract`` deploys a Doppelganger (see
``contracts/test/Doppelganger.sol``) and wraps it with the ABI of the
contract it stands in for. Responses are configured per function::

    mock = deploy_mock_contract(w3, sender, load_contract_abi("IERC721"))
    mock.mock.balanceOf.returns(1)                    # any caller
    mock.mock.balanceOf.with_args(other).returns(0)   # exact calldata wins
    mock.mock.ownerOf.reverts_with_reason("nope")

Calling a function that has no configured response reverts with
``Mock on the method is not initialized``.
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector
from web3 import Web3

from .blockchain import Sender, call_function, deploy_contract, send_transaction

logger = logging.getLogger(__name__)

DOPPELGANGER = "Doppelganger"
DEFAULT_REVERT_REASON = "Mock revert"


def _abi_type(param: dict) -> str:
    """Canonical type string of an ABI parameter, expanding tuples."""
    if param["type"].startswith("tuple"):
        inner = ",".join(_abi_type(component) for component in param["components"])
        return f"({inner}){param['type'][len('tuple'):]}"
    return param["type"]


def function_signature(fn_abi: dict) -> str:
    return f"{fn_abi['name']}({','.join(_abi_type(p) for p in fn_abi['inputs'])})"


def encode_call(fn_abi: dict, args) -> bytes:
    """Selector followed by the ABI-encoded arguments."""
    input_types = [_abi_type(p) for p in fn_abi["inputs"]]
    if len(args) != len(input_types):
        raise ValueError(
            f"{function_signature(fn_abi)} expects {len(input_types)} arguments, got {len(args)}"
        )
    selector = function_signature_to_4byte_selector(function_signature(fn_abi))
    return selector + encode(input_types, list(args))


def find_function(abi: List[dict], name: str, arg_count: int) -> dict:
    candidates = [
        item for item in abi
        if item.get("type") == "function" and item["name"] == name and len(item["inputs"]) == arg_count
    ]
    if not candidates:
        raise ValueError(f"No function {name} taking {arg_count} arguments in ABI")
    if len(candidates) > 1:
        raise ValueError(f"Function {name} with {arg_count} arguments is ambiguous")
    return candidates[0]


class Stub:
    """Response configuration for one function of a mock."""

    def __init__(self, mock: "MockContract", fn_abi: dict, args: Optional[tuple] = None):
        self._mock = mock
        self._abi = fn_abi
        self._args = args
        self.signature = function_signature(fn_abi)
        self.selector = function_signature_to_4byte_selector(self.signature)

    def __repr__(self):
        return f"<Stub {self.signature}{'' if self._args is None else f' with {self._args}'}>"

    def with_args(self, *args) -> "Stub":
        # Validate arity now rather than at the first returns()/reverts()
        encode_call(self._abi, args)
        return Stub(self._mock, self._abi, args)

    @property
    def calldata(self) -> bytes:
        if self._args is None:
            return self.selector
        return encode_call(self._abi, self._args)

    def returns(self, *values):
        output_types = [_abi_type(p) for p in self._abi.get("outputs", [])]
        if len(values) != len(output_types):
            raise ValueError(f"{self.signature} returns {len(output_types)} values, got {len(values)}")
        return self._mock._configure("__waffle__mockReturns", self.calldata, encode(output_types, list(values)))

    def reverts(self):
        return self.reverts_with_reason(DEFAULT_REVERT_REASON)

    def reverts_with_reason(self, reason: str):
        return self._mock._configure("__waffle__mockReverts", self.calldata, reason)


class MockNamespace:
    """``mock.mock.<name>`` by function name, ``mock.mock["name(types)"]`` by signature."""

    def __init__(self, stubs_by_name: Dict[str, Optional[Stub]], stubs_by_signature: Dict[str, Stub]):
        self._by_name = stubs_by_name
        self._by_signature = stubs_by_signature

    def __getattr__(self, name: str) -> Stub:
        if name.startswith("_"):
            raise AttributeError(name)
        if name not in self._by_name:
            raise AttributeError(f"Mock has no function {name}")
        stub = self._by_name[name]
        if stub is None:
            overloads = sorted(s for s in self._by_signature if s.startswith(f"{name}("))
            raise AttributeError(f"{name} is overloaded, use one of {overloads}")
        return stub

    def __getitem__(self, key: str) -> Stub:
        if "(" in key:
            if key not in self._by_signature:
                raise AttributeError(f"Mock has no function {key}")
            return self._by_signature[key]
        return getattr(self, key)


class MockContract:
    def __init__(self, w3: Web3, deployer: Sender, address: str, abi: list, doppelganger_abi: list):
        self.w3 = w3
        self.deployer = deployer
        self.address = address
        self.abi = abi
        self.contract = w3.eth.contract(address=address, abi=abi)
        self._doppelganger = w3.eth.contract(address=address, abi=doppelganger_abi)

        by_name: Dict[str, Optional[Stub]] = {}
        by_signature: Dict[str, Stub] = {}
        for item in abi:
            if item.get("type") != "function":
                continue
            stub = Stub(self, item)
            by_signature[stub.signature] = stub
            # Overloaded names are only reachable by signature
            by_name[item["name"]] = None if item["name"] in by_name else stub
        self.mock = MockNamespace(by_name, by_signature)

    def __repr__(self):
        return f"<MockContract {self.address}>"

    def _configure(self, fn_name: str, *args):
        fn = self._doppelganger.get_function_by_name(fn_name)
        return send_transaction(self.w3, fn(*args), self.deployer)

    def call(self, target, function_name: str, *args, sender: Optional[Sender] = None):
        """Send a transaction to ``target`` (a web3 contract) with the mock as msg.sender."""
        fn_abi = find_function(target.abi, function_name, len(args))
        forward = self._doppelganger.get_function_by_name("__waffle__call")
        return send_transaction(
            self.w3, forward(target.address, encode_call(fn_abi, args)), sender or self.deployer
        )

    def staticcall(self, target, function_name: str, *args):
        """Read from ``target`` with the mock as msg.sender; single outputs are unwrapped."""
        fn_abi = find_function(target.abi, function_name, len(args))
        forward = self._doppelganger.get_function_by_name("__waffle__staticcall")
        raw = call_function(forward(target.address, encode_call(fn_abi, args)))
        output_types = [_abi_type(p) for p in fn_abi.get("outputs", [])]
        result = decode(output_types, raw)
        return result[0] if len(result) == 1 else result


def deploy_mock_contract(
    w3: Web3,
    deployer: Sender,
    abi: list,
    build_dir: Optional[Union[str, Path]] = None,
) -> MockContract:
    """Deploy a Doppelganger that answers calls described by ``abi``."""
    address, doppelganger_abi = deploy_contract(w3, deployer, DOPPELGANGER, build_dir=build_dir)
    logger.debug(f"Mock contract deployed to: {address}")
    return MockContract(w3, deployer, address, abi, doppelganger_abi)
