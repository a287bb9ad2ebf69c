"""
Loading of compiled contract artifacts.

Artifacts are flat JSON files, one per contract, written by
``nftpass.compiler`` into the build directory::

    build/NFTPass.json  ->  {"contractName", "sourceName", "abi", "bytecode", "compiler"}
"""
import json
from pathlib import Path
from typing import Optional, Union

from .core.config import settings


def artifact_path(contract_name: str, build_dir: Optional[Union[str, Path]] = None) -> Path:
    """Path of a contract artifact inside the build directory."""
    build_dir = Path(build_dir) if build_dir is not None else settings.BUILD_DIR
    return build_dir / f"{contract_name}.json"


def load_artifact(contract_name: str, build_dir: Optional[Union[str, Path]] = None) -> dict:
    """Load a compiled contract artifact."""
    contract_file = artifact_path(contract_name, build_dir)

    if not contract_file.exists():
        raise FileNotFoundError(f"Contract artifact not found: {contract_file}. Run nftpass-compile first.")

    with open(contract_file) as f:
        return json.load(f)


def load_contract_abi(contract_name: str, build_dir: Optional[Union[str, Path]] = None) -> list:
    """Load contract ABI from artifacts."""
    return load_artifact(contract_name, build_dir)["abi"]


def get_contract_bytecode(contract_name: str, build_dir: Optional[Union[str, Path]] = None) -> str:
    """Get contract bytecode from artifacts."""
    bytecode = load_artifact(contract_name, build_dir)["bytecode"]
    if not bytecode or bytecode == "0x":
        raise ValueError(f"{contract_name} has no bytecode (is it an interface or abstract contract?)")
    return bytecode
