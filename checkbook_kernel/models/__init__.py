"""ORM models. Importing this package registers every table on Base.metadata."""

from checkbook_kernel.models.ledger import LedgerModel, ProfileModel
from checkbook_kernel.models.transaction import TransactionRecordModel

__all__ = [
    "LedgerModel",
    "ProfileModel",
    "TransactionRecordModel",
]
