"""
Deployment and test tooling for the NFT Pass contract.
"""
__version__ = "0.1.0"
