from .chain_data import AbstractChainDataProvider

__all__ = ("AbstractChainDataProvider",)
