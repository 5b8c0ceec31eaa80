#!/usr/bin/env python3
"""
Print ledgers, their derived balances and transaction history.

Usage:
    python3 scripts/ledger_report.py
    python3 scripts/ledger_report.py --db sqlite:///checkbook.db --ledger Ops
    python3 scripts/ledger_report.py --config preferences.yaml --search acme
"""

import argparse
import logging
import sys
from decimal import Decimal
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

W = 80


def _fmt(v) -> str:
    d = Decimal(str(v))
    return f"${d:,.2f}"


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--db", help="SQLAlchemy database URL (overrides --config)")
    parser.add_argument("--config", help="Preferences YAML file")
    parser.add_argument("--ledger", help="Only this ledger (name, any case)")
    parser.add_argument("--search", help="Filter history by payee, memo or amount")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.disable(logging.CRITICAL)

    from checkbook_config import get_active_config
    from checkbook_kernel.db.engine import create_tables, get_session, init_engine_from_url
    from checkbook_kernel.services.ledger_repository import LedgerRepository

    try:
        config = get_active_config(args.config)
        init_engine_from_url(args.db or config.database.url, echo=False)
        create_tables()
    except Exception as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    session = get_session()

    try:
        repo = LedgerRepository(session)

        ledgers = repo.list_ledgers()
        if args.ledger:
            match = repo.find_ledger_by_name(args.ledger)
            if match is None:
                print(f"  No ledger named {args.ledger!r}.", file=sys.stderr)
                return 1
            ledgers = [match]

        if not ledgers:
            print("  No ledgers found.")
            return 1

        print()
        print("=" * W)
        print("LEDGERS".center(W))
        print("=" * W)
        print()

        for ledger in ledgers:
            balance = repo.current_balance(ledger.ledger_id)
            print(f"  {ledger.name}")
            print(f"  Starting {_fmt(ledger.starting_balance):>14}   Balance {_fmt(balance):>14}")
            if ledger.balance != balance:
                print(f"  (cached balance {_fmt(ledger.balance)} is stale)")
            print(f"  {'Date':<11} {'No.':<7} {'Payee':<28} {'Amount':>14} {'After':>14}")
            print(f"  {'-'*11} {'-'*7} {'-'*28} {'-'*14} {'-'*14}")

            history = repo.history(ledger.ledger_id, search=args.search)
            for record in history:
                sign = "-" if record.kind.value == "check" else "+"
                if record.kind.value == "note":
                    sign = " "
                print(
                    f"  {record.date.isoformat():<11} {(record.check_number or ''):<7} "
                    f"{record.payee[:28]:<28} {sign + _fmt(record.amount):>14} "
                    f"{_fmt(record.snapshot.new_balance):>14}"
                )

            print(f"  {len(history)} record(s)")
            print()

        return 0

    finally:
        session.close()


if __name__ == "__main__":
    sys.exit(main())
