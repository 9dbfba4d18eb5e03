"""Land registry: land verification and ownership-transfer workflow API."""

from land_registry.client import RegistryClient, RegistryClientError
from land_registry.common.receipts import generate_tx_hash

__all__ = [
    "RegistryClient",
    "RegistryClientError",
    "generate_tx_hash",
]
__version__ = "0.1.0"
