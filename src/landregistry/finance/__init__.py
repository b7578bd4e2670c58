"""Fee policy and value transfer collaborators for the registry."""

from landregistry.finance.fees import FeePolicy
from landregistry.finance.models import TransferRecord
from landregistry.finance.transfer import InMemoryLedger, ValueTransfer

__all__ = ["FeePolicy", "InMemoryLedger", "TransferRecord", "ValueTransfer"]
