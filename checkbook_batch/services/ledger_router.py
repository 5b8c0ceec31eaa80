"""
LedgerRouter -- maps free-text ledger names from the queue to ledger ids.

Contract:
    ``resolve(name)`` matches the trimmed name case-insensitively against
    the ledgers known when the batch started and those provisioned earlier
    in the same batch.  An unknown name provisions a new ledger (local to
    the batch until the Commit Phase persists it).  A blank name resolves
    to the default (active) ledger.

Guarantees:
    - The same name in any case resolves to the same id within one batch;
      the first-seen spelling is kept as the ledger's name.
    - ``new_ledgers`` is in provisioning order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from uuid import UUID, uuid4

from checkbook_kernel.domain.types import Ledger
from checkbook_kernel.logging_config import get_logger

logger = get_logger("batch.ledger_router")


def _key(name: str) -> str:
    return name.strip().lower()


class LedgerRouter:
    """Batch-local ledger registry."""

    def __init__(
        self,
        known_ledgers: Iterable[Ledger],
        default_ledger_id: UUID,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        self._default_ledger_id = default_ledger_id
        self._id_factory = id_factory
        self._by_key: dict[str, UUID] = {}
        self._names: dict[UUID, str] = {}
        self._new: list[Ledger] = []
        for ledger in known_ledgers:
            self._by_key.setdefault(_key(ledger.name), ledger.ledger_id)
            self._names[ledger.ledger_id] = ledger.name

    @property
    def default_ledger_id(self) -> UUID:
        return self._default_ledger_id

    @property
    def new_ledgers(self) -> list[Ledger]:
        return list(self._new)

    def is_new(self, ledger_id: UUID) -> bool:
        return any(l.ledger_id == ledger_id for l in self._new)

    def ledger_name(self, ledger_id: UUID) -> str:
        return self._names.get(ledger_id, "")

    def resolve(self, name: str | None) -> UUID:
        if name is None or not name.strip():
            return self._default_ledger_id

        key = _key(name)
        existing = self._by_key.get(key)
        if existing is not None:
            return existing

        ledger = Ledger(ledger_id=self._id_factory(), name=name.strip())
        self._by_key[key] = ledger.ledger_id
        self._names[ledger.ledger_id] = ledger.name
        self._new.append(ledger)
        logger.info(
            "ledger_provisioned",
            extra={"new_ledger_id": str(ledger.ledger_id), "ledger_name": ledger.name},
        )
        return ledger.ledger_id
