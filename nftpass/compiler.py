"""
Compile the Solidity sources into flat artifacts with py-solc-x.
"""
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

import solcx
from packaging.version import Version

from .artifacts import artifact_path
from .core.config import settings

logger = logging.getLogger(__name__)


def install_compiler(solc_version: str) -> None:
    """Download solc unless this exact version is already installed."""
    if Version(solc_version) in solcx.get_installed_solc_versions():
        return
    logger.info(f"Installing solc {solc_version}")
    solcx.install_solc(solc_version)


def collect_sources(contracts_dir: Path) -> Dict[str, dict]:
    """Standard-JSON ``sources`` for every .sol file, keyed by its path relative to contracts_dir."""
    sources = {}
    for source_file in sorted(contracts_dir.rglob("*.sol")):
        source_name = source_file.relative_to(contracts_dir).as_posix()
        sources[source_name] = {"content": source_file.read_text()}
    if not sources:
        raise FileNotFoundError(f"No Solidity sources found in {contracts_dir}")
    return sources


def compile_contracts(
    contracts_dir: Optional[Union[str, Path]] = None,
    build_dir: Optional[Union[str, Path]] = None,
    solc_version: Optional[str] = None,
) -> Dict[str, dict]:
    """Compile every contract and write one artifact per contract into build_dir."""
    contracts_dir = Path(contracts_dir) if contracts_dir is not None else settings.CONTRACTS_DIR
    build_dir = Path(build_dir) if build_dir is not None else settings.BUILD_DIR
    solc_version = solc_version or settings.SOLC_VERSION

    install_compiler(solc_version)
    sources = collect_sources(contracts_dir)
    logger.info(f"Compiling {len(sources)} source files with solc {solc_version}")

    compiled = solcx.compile_standard(
        {
            "language": "Solidity",
            "sources": sources,
            "settings": {
                "optimizer": {"enabled": True, "runs": 200},
                "outputSelection": {"*": {"*": ["abi", "evm.bytecode.object"]}},
            },
        },
        solc_version=solc_version,
    )

    build_dir.mkdir(parents=True, exist_ok=True)
    artifacts = {}
    for source_name, contracts in compiled["contracts"].items():
        for contract_name, output in contracts.items():
            artifact = {
                "contractName": contract_name,
                "sourceName": source_name,
                "abi": output["abi"],
                "bytecode": "0x" + output["evm"]["bytecode"]["object"],
                "compiler": solc_version,
            }
            with open(artifact_path(contract_name, build_dir), "w") as f:
                json.dump(artifact, f, indent=2)
            artifacts[contract_name] = artifact

    logger.info(f"Wrote {len(artifacts)} artifacts to {build_dir}")
    return artifacts


def ensure_compiled(contract_names: Iterable[str], build_dir: Optional[Union[str, Path]] = None) -> None:
    """Compile only when one of the named artifacts is missing."""
    missing = [name for name in contract_names if not artifact_path(name, build_dir).exists()]
    if missing:
        logger.info(f"Missing artifacts for {', '.join(missing)}, compiling")
        compile_contracts(build_dir=build_dir)


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    try:
        artifacts = compile_contracts()
    except Exception as e:
        logger.error(f"Compilation failed: {e}", exc_info=True)
        return 1
    for name in sorted(artifacts):
        print(f"  {name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
