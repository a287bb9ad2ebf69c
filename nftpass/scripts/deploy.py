#!/usr/bin/env python3
"""
Deploy the NFTPass contract.

    nftpass-deploy --network goerli
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from nftpass.blockchain import get_deployer, get_web3, sender_address
from nftpass.compiler import ensure_compiled
from nftpass.core.config import settings
from nftpass.nft_pass import CONTRACT_NAME, NFTPass

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Deploy the NFTPass contract")
    p.add_argument(
        "--network",
        default="localhost",
        help=f"Network to deploy to: {', '.join(settings.available_networks())} (default: localhost)",
    )
    return p


def redact_url(url: Optional[str]) -> Optional[str]:
    """Keep the provider API key out of the deployment record."""
    if url and settings.ALCHEMY_KEY:
        return url.replace(settings.ALCHEMY_KEY, "<ALCHEMY_KEY>")
    return url


def deploy(network_name: str) -> dict:
    """Compile if needed, deploy NFTPass and record the deployment."""
    network = settings.get_network(network_name)

    print("deploying smart contract")
    ensure_compiled([CONTRACT_NAME])

    w3 = get_web3(network)
    deployer = get_deployer(w3, network)
    deployer_address = sender_address(deployer)

    print(f"Deploying contracts with account: {deployer_address}")
    balance = w3.eth.get_balance(deployer_address)
    print(f"Account balance: {w3.from_wei(balance, 'ether')} ETH")

    nft = NFTPass.deploy(
        w3,
        deployer,
        settings.PASS_NAME,
        settings.PASS_SYMBOL,
        settings.PASS_BASE_URI,
    )
    print(f"{CONTRACT_NAME} deployed to: {nft.address}")

    deployment_info = {
        "network": network.name,
        "chainId": w3.eth.chain_id,
        "contracts": {
            CONTRACT_NAME: nft.address,
        },
        "deployer": deployer_address,
        "rpcUrl": redact_url(network.url),
    }

    with open(settings.DEPLOYMENTS_FILE, "w") as f:
        json.dump(deployment_info, f, indent=2)
    print(f"Deployment info saved to: {settings.DEPLOYMENTS_FILE}")

    return deployment_info


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)

    try:
        deploy(args.network)
    except Exception as e:
        logger.error(f"Deployment failed: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
