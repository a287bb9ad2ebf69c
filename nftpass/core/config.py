from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent.parent

# Alchemy RPC endpoints, keyed by network name
ALCHEMY_URLS = {
    "goerli": "https://eth-goerli.g.alchemy.com/v2/{key}",
    "mainnet": "https://eth-mainnet.g.alchemy.com/v2/{key}",
}
CHAIN_IDS = {
    "goerli": 5,
    "mainnet": 1,
}

TESTER_NETWORK = "tester"


class NetworkConfig(BaseModel):
    name: str
    url: Optional[str] = None
    accounts: List[str] = []
    chain_id: Optional[int] = None


class Settings(BaseSettings):
    PROJECT_NAME: str = "NFT Pass"

    ALCHEMY_KEY: str = ""
    PRIVATE_KEY: str = ""
    LOCAL_RPC_URL: str = "http://127.0.0.1:8545"

    SOLC_VERSION: str = "0.8.9"
    CONTRACTS_DIR: Path = PACKAGE_DIR / "contracts"
    BUILD_DIR: Path = Path("build")
    DEPLOYMENTS_FILE: Path = Path("deployments.json")

    # Constructor arguments used by the deploy script
    PASS_NAME: str = "NFTPass"
    PASS_SYMBOL: str = "ATTPASS"
    PASS_BASE_URI: str = "https://metadata.attic.xyz"

    # This configures Pydantic to read variables from the ".env" file
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    def available_networks(self) -> List[str]:
        return [*ALCHEMY_URLS, "localhost", TESTER_NETWORK]

    def get_network(self, name: str) -> NetworkConfig:
        """Resolve a named network to its RPC URL and signing accounts."""
        if name in ALCHEMY_URLS:
            if not self.ALCHEMY_KEY:
                raise ValueError(f"Environment variable ALCHEMY_KEY is not set. It is required for the {name} network.")
            if not self.PRIVATE_KEY:
                raise ValueError(f"Environment variable PRIVATE_KEY is not set. It is required for the {name} network.")
            return NetworkConfig(
                name=name,
                url=ALCHEMY_URLS[name].format(key=self.ALCHEMY_KEY),
                accounts=[self.PRIVATE_KEY],
                chain_id=CHAIN_IDS[name],
            )

        if name == "localhost":
            # Without a key the node's unlocked accounts sign
            accounts = [self.PRIVATE_KEY] if self.PRIVATE_KEY else []
            return NetworkConfig(name=name, url=self.LOCAL_RPC_URL, accounts=accounts)

        if name == TESTER_NETWORK:
            return NetworkConfig(name=name)

        raise ValueError(f"Unknown network '{name}'. Available networks: {', '.join(self.available_networks())}")


settings = Settings()
