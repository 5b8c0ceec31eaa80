"""
checkbook_batch -- Batch print & record engine.

Drains an import queue through a print host and records only the checks
that actually printed.  Two layouts: one check per page (standard) and
three checks per sheet (three-up).

Architecture:
    checkbook_batch/ is a top-level package.  Nothing in checkbook_kernel/
    imports from it.  The database is written once per batch, in the
    Commit Phase.
"""
