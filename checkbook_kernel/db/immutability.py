"""
ORM-level append-only enforcement for transaction records.

A written TransactionRecord is never updated.  Balances are derived from
history, so removing a wrong record is enough to restore correct economics;
editing one in place would silently rewrite every snapshot after it.

SQLAlchemy fires ``before_update`` before the SQL reaches the database:

    session.flush()
         |
         v
    [before_update] --> _check_transaction_record_update() --> ImmutableRecordError
         |
         v
    SQL sent to database (only if the check passes)

Deletion goes through unchecked.
"""

from sqlalchemy import event

from checkbook_kernel.exceptions import ImmutableRecordError
from checkbook_kernel.logging_config import get_logger

logger = get_logger("db.immutability")


def _check_transaction_record_update(mapper, connection, target):
    """Prevent any UPDATE of a TransactionRecordModel row."""
    from checkbook_kernel.models.transaction import TransactionRecordModel

    if not isinstance(target, TransactionRecordModel):
        return

    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": "TransactionRecord",
            "entity_id": str(target.id),
            "operation": "UPDATE",
        },
    )
    raise ImmutableRecordError(record_id=str(target.id))


def register_immutability_listeners():
    """
    Register the append-only listeners.

    Safe to call more than once.
    """
    from checkbook_kernel.models.transaction import TransactionRecordModel

    if not event.contains(
        TransactionRecordModel, "before_update", _check_transaction_record_update
    ):
        event.listen(
            TransactionRecordModel, "before_update", _check_transaction_record_update
        )


def unregister_immutability_listeners():
    """Remove the listeners (test teardown)."""
    from checkbook_kernel.models.transaction import TransactionRecordModel

    if event.contains(
        TransactionRecordModel, "before_update", _check_transaction_record_update
    ):
        event.remove(
            TransactionRecordModel, "before_update", _check_transaction_record_update
        )
