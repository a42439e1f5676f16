from .base import ChainGateway
from .web3_chain import Web3ChainGateway

__all__ = ["ChainGateway", "Web3ChainGateway"]
