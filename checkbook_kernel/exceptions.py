"""
Typed exception hierarchy for the checkbook kernel and batch engine.

Every error has its own class, a static machine-readable ``code`` class
attribute, and carries its context as attributes rather than only inside
the message string.  Callers catch by type and read structured fields:

    try:
        validate_print_configuration(preferences, host)
    except PrinterNotConfiguredError as e:
        show_settings(reason=e.code)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    CheckbookError (base)
    |
    +-- ConfigurationError
    |   +-- PrinterNotConfiguredError
    |   +-- PrinterNotFoundError
    |   +-- PdfExportFolderMissingError
    |   +-- InvalidPreferencesError
    |
    +-- LedgerError
    |   +-- LedgerNotFoundError
    |   +-- DuplicateLedgerError
    |
    +-- TransactionError
    |   +-- InvalidTransactionError
    |   +-- TransactionNotFoundError
    |   +-- ImmutableRecordError
    |
    +-- ProfileNotFoundError
    |
    +-- BatchError
        +-- BatchAlreadyRunningError
        +-- NoPendingDecisionError
        +-- DecisionAlreadyPendingError

===============================================================================
ERROR CODES
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Configuration   | PRINTER_NOT_CONFIGURED      | Silent mode without a saved printer
                | PRINTER_NOT_FOUND           | Saved printer not reported by the host
                | PDF_EXPORT_FOLDER_MISSING   | PDF mode without an export folder
                | INVALID_PREFERENCES         | Preferences file has bad values
----------------|-----------------------------|-----------------------------------------
Ledger          | LEDGER_NOT_FOUND            | Ledger id doesn't exist
                | DUPLICATE_LEDGER            | Name already used (case-insensitive)
----------------|-----------------------------|-----------------------------------------
Transaction     | INVALID_TRANSACTION         | Non-positive amount or blank payee
                | TRANSACTION_NOT_FOUND       | Record id doesn't exist
                | IMMUTABLE_RECORD            | Attempt to UPDATE a written record
----------------|-----------------------------|-----------------------------------------
Profile         | PROFILE_NOT_FOUND           | Profile id doesn't exist
----------------|-----------------------------|-----------------------------------------
Batch           | BATCH_ALREADY_RUNNING       | run() while another walk is in flight
                | NO_PENDING_DECISION         | Abort/Skip fed with nothing to decide
                | DECISION_ALREADY_PENDING    | Second failure before first resolved

A print failure is NOT an exception: it is a failed ``PrintResult`` that
always goes to the operator for an Abort/Skip decision.
"""


class CheckbookError(Exception):
    """
    Base exception for all checkbook errors.

    All subclasses carry a ``code`` class attribute.
    """

    code: str = "CHECKBOOK_ERROR"


# Configuration-related exceptions


class ConfigurationError(CheckbookError):
    """Batch cannot start because print delivery is misconfigured."""

    code: str = "CONFIGURATION_ERROR"


class PrinterNotConfiguredError(ConfigurationError):
    """Silent mode selected but no printer device name saved."""

    code: str = "PRINTER_NOT_CONFIGURED"

    def __init__(self):
        super().__init__("Please select a printer for silent printing mode")


class PrinterNotFoundError(ConfigurationError):
    """The saved printer is not among the printers the host reports."""

    code: str = "PRINTER_NOT_FOUND"

    def __init__(self, device_name: str, available: list[str]):
        self.device_name = device_name
        self.available = available
        super().__init__(
            f"Printer {device_name!r} not found. "
            f"Available: {', '.join(available) or 'none'}"
        )


class PdfExportFolderMissingError(ConfigurationError):
    """PDF mode selected but no export folder saved."""

    code: str = "PDF_EXPORT_FOLDER_MISSING"

    def __init__(self):
        super().__init__("Please select a folder for PDF export")


class InvalidPreferencesError(ConfigurationError):
    """A preferences value failed validation."""

    code: str = "INVALID_PREFERENCES"

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid preference {field}={value!r}: {reason}")


# Ledger-related exceptions


class LedgerError(CheckbookError):
    """Base exception for ledger errors."""

    code: str = "LEDGER_ERROR"


class LedgerNotFoundError(LedgerError):
    """Ledger with given ID was not found."""

    code: str = "LEDGER_NOT_FOUND"

    def __init__(self, ledger_id: str):
        self.ledger_id = ledger_id
        super().__init__(f"Ledger not found: {ledger_id}")


class DuplicateLedgerError(LedgerError):
    """A ledger with the same name (case-insensitive) already exists."""

    code: str = "DUPLICATE_LEDGER"

    def __init__(self, name: str, existing_id: str):
        self.name = name
        self.existing_id = existing_id
        super().__init__(f"Ledger {name!r} already exists: {existing_id}")


# Transaction-related exceptions


class TransactionError(CheckbookError):
    """Base exception for transaction record errors."""

    code: str = "TRANSACTION_ERROR"


class InvalidTransactionError(TransactionError):
    """Amount must be positive and payee/description non-blank."""

    code: str = "INVALID_TRANSACTION"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid transaction: {reason}")


class TransactionNotFoundError(TransactionError):
    """Transaction record with given ID was not found."""

    code: str = "TRANSACTION_NOT_FOUND"

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Transaction not found: {record_id}")


class ImmutableRecordError(TransactionError):
    """
    Attempted to modify a written transaction record.

    Records are append-only. Deleting is the only allowed mutation; the
    derived balance corrects itself.
    """

    code: str = "IMMUTABLE_RECORD"

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(
            f"Transaction record {record_id} is immutable; delete it instead"
        )


# Profile-related exceptions


class ProfileNotFoundError(CheckbookError):
    """Profile with given ID was not found."""

    code: str = "PROFILE_NOT_FOUND"

    def __init__(self, profile_id: str):
        self.profile_id = profile_id
        super().__init__(f"Profile not found: {profile_id}")


# Batch-related exceptions


class BatchError(CheckbookError):
    """Base exception for batch print errors."""

    code: str = "BATCH_ERROR"


class BatchAlreadyRunningError(BatchError):
    """A batch walk is already in flight on this orchestrator."""

    code: str = "BATCH_ALREADY_RUNNING"

    def __init__(self, batch_id: str):
        self.batch_id = batch_id
        super().__init__(f"Batch {batch_id} is already running")


class NoPendingDecisionError(BatchError):
    """An operator decision was supplied with no print failure awaiting one."""

    code: str = "NO_PENDING_DECISION"

    def __init__(self, decision: str):
        self.decision = decision
        super().__init__(
            f"No print failure is awaiting a decision (got {decision!r})"
        )


class DecisionAlreadyPendingError(BatchError):
    """A second decision was requested before the first was resolved."""

    code: str = "DECISION_ALREADY_PENDING"

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"A decision is already pending for {label!r}")
