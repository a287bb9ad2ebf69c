"""
Client for the NFTPass contract.

Every method maps onto one contract function. Write methods send a
transaction from the bound sender and return the mined receipt; a revert
raises ``web3.exceptions.ContractLogicError``.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from web3 import Web3

from .artifacts import load_contract_abi
from .blockchain import Sender, call_function, deploy_contract, send_transaction

logger = logging.getLogger(__name__)

CONTRACT_NAME = "NFTPass"

# Token standards accepted by checkWhitelist/mint
ERC721 = 0
ERC1155 = 1


class NFTPass:
    def __init__(self, w3: Web3, address: str, abi: list, sender: Optional[Sender] = None):
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)
        self.abi = abi
        self.sender = sender
        self.contract = w3.eth.contract(address=self.address, abi=abi)

    def __repr__(self):
        return f"<NFTPass {self.address}>"

    @classmethod
    def deploy(
        cls,
        w3: Web3,
        deployer: Sender,
        name: str,
        symbol: str,
        base_uri: str,
        build_dir: Optional[Union[str, Path]] = None,
    ) -> "NFTPass":
        address, abi = deploy_contract(w3, deployer, CONTRACT_NAME, name, symbol, base_uri, build_dir=build_dir)
        return cls(w3, address, abi, sender=deployer)

    @classmethod
    def at(
        cls,
        w3: Web3,
        address: str,
        sender: Optional[Sender] = None,
        build_dir: Optional[Union[str, Path]] = None,
    ) -> "NFTPass":
        return cls(w3, address, load_contract_abi(CONTRACT_NAME, build_dir), sender=sender)

    def connect(self, sender: Sender) -> "NFTPass":
        """The same contract, sending from another account."""
        return NFTPass(self.w3, self.address, self.abi, sender=sender)

    def _transact(self, call, value: int = 0):
        if self.sender is None:
            raise ValueError("No sender bound to this NFTPass client; use connect(sender)")
        return send_transaction(self.w3, call, self.sender, value=value)

    def _call(self, call):
        return call_function(call, self.sender)

    # Owner operations

    def invite_community(self, community: str):
        logger.info(f"Inviting community {community}")
        return self._transact(self.contract.functions.inviteCommunity(community))

    def remove_community(self, community: str):
        logger.info(f"Removing community {community}")
        return self._transact(self.contract.functions.removeCommunity(community))

    def set_price(self, price: int):
        return self._transact(self.contract.functions.setPrice(price))

    def set_base_uri(self, base_uri: str):
        return self._transact(self.contract.functions.setBaseURI(base_uri))

    def withdraw(self):
        return self._transact(self.contract.functions.withdraw())

    def transfer_ownership(self, new_owner: str):
        return self._transact(self.contract.functions.transferOwnership(new_owner))

    # Minting

    def check_whitelist(self, community: str, standard: int = ERC721, token_id: int = 0) -> bool:
        """Whether the bound sender holds a token of an invited community."""
        return self._call(self.contract.functions.checkWhitelist(community, standard, token_id))

    def mint(self, community: str, quantity: int, standard: int = ERC721, token_id: int = 0, value: int = 0):
        return self._transact(
            self.contract.functions.mint(community, standard, token_id, quantity),
            value=value,
        )

    def check_user_minted(self, user: str) -> bool:
        return self._call(self.contract.functions.checkUserMinted(user))

    def is_invited(self, community: str) -> bool:
        return self._call(self.contract.functions.invitedCommunities(community))

    # Views

    def price(self) -> int:
        return self._call(self.contract.functions.price())

    def balance_of(self, owner: str) -> int:
        return self._call(self.contract.functions.balanceOf(owner))

    def owner_of(self, token_id: int) -> str:
        return self._call(self.contract.functions.ownerOf(token_id))

    def owner(self) -> str:
        return self._call(self.contract.functions.owner())

    def total_supply(self) -> int:
        return self._call(self.contract.functions.totalSupply())

    def max_supply(self) -> int:
        return self._call(self.contract.functions.MAX_SUPPLY())

    def token_uri(self, token_id: int) -> str:
        return self._call(self.contract.functions.tokenURI(token_id))

    def name(self) -> str:
        return self._call(self.contract.functions.name())

    def symbol(self) -> str:
        return self._call(self.contract.functions.symbol())
