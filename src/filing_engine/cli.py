"""Filing engine command line interface.

Provides operational tools for:
- Schema creation
- Roster reconciliation from a snapshot file
- Period payroll calculation
- Period listing

Usage:
    python -m filing_engine.cli init-db
    python -m filing_engine.cli sync --period "2026 Yanvar" --file roster.csv [--dry-run]
    python -m filing_engine.cli payroll --period 2026-01 [--json]
    python -m filing_engine.cli periods --year 2026
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from decimal import Decimal
from typing import Any, Callable

from sqlalchemy.engine import Engine

from filing_engine.calculators import CompensationEngine
from filing_engine.config import get_settings
from filing_engine.database import get_sync_engine, sync_session
from filing_engine.models import Base
from filing_engine.periods import available_periods, format_period, period_storage_key
from filing_engine.services.directory import DirectoryRepository
from filing_engine.services.ledger_store import SqlLedgerStore
from filing_engine.services.reconciliation import LedgerWriteError, ReconciliationService
from filing_engine.services.state_machine import NoRegressionGuard
from filing_engine.sync.snapshot import SnapshotFormatError, load_snapshot
from filing_engine.types import Role


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, set):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class FilingCli:
    """Filing engine command line interface."""

    def __init__(self, engine: Engine | None = None) -> None:
        self.engine = engine
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m filing_engine.cli",
            description="Filing engine operational tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        subparsers.add_parser(
            "init-db",
            help="Create database tables",
        )

        sync = subparsers.add_parser(
            "sync",
            help="Reconcile a roster snapshot into task ledgers",
        )
        sync.add_argument(
            "--period",
            type=str,
            required=True,
            help='Period label ("2026-01", "2026 Yanvar", "2026 Yillik")',
        )
        sync.add_argument(
            "--file",
            type=str,
            required=True,
            help="Snapshot file (.csv or .json)",
        )
        sync.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would change without writing",
        )
        sync.add_argument(
            "--no-regression",
            action="store_true",
            help="Refuse automated writes that reopen approved tasks",
        )

        payroll = subparsers.add_parser(
            "payroll",
            help="Calculate staff compensation for a period",
        )
        payroll.add_argument(
            "--period",
            type=str,
            required=True,
            help="Period label",
        )
        payroll.add_argument(
            "--include-inactive",
            action="store_true",
            help="Include inactive companies",
        )
        payroll.add_argument(
            "--json",
            action="store_true",
            help="Print JSON instead of a table",
        )

        periods = subparsers.add_parser(
            "periods",
            help="List month period labels",
        )
        periods.add_argument(
            "--year",
            type=int,
            default=date.today().year,
            help="Year to list (default: current year)",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        handlers: dict[str, Callable[..., int]] = {
            "init-db": self._cmd_init_db,
            "sync": self._cmd_sync,
            "payroll": self._cmd_payroll,
            "periods": self._cmd_periods,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _get_engine(self) -> Engine:
        if self.engine is None:
            self.engine = get_sync_engine()
        return self.engine

    def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create all tables."""
        Base.metadata.create_all(self._get_engine())
        print("Database tables created.")
        return 0

    def _cmd_sync(self, args: argparse.Namespace) -> int:
        """Reconcile one snapshot file."""
        settings = get_settings()
        try:
            records = load_snapshot(args.file)
        except SnapshotFormatError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

        print(f"Reconciling {len(records)} records for period {args.period}")
        if args.dry_run:
            print("[DRY RUN] No ledgers will be written")

        try:
            with sync_session(self._get_engine()) as session:
                companies = DirectoryRepository(session).list_companies()
                service = ReconciliationService(
                    SqlLedgerStore(session),
                    companies,
                    guard=NoRegressionGuard() if args.no_regression else None,
                    language=settings.snapshot_language,
                )
                result = service.run_reconciliation(
                    records, period=args.period, dry_run=args.dry_run
                )
        except LedgerWriteError as e:
            # The session rolled back, so nothing from this batch landed.
            print(f"ERROR: {e}", file=sys.stderr)
            print(f"  Partial result before rollback: {e.result.summary()}", file=sys.stderr)
            return 1

        print("\nSummary")
        print("=" * 40)
        for key, value in result.summary().items():
            print(f"  {key}: {value}")

        if result.skipped:
            print("\nUnmatched records:")
            for skipped in result.skipped:
                print(f"  row {skipped.row}: {skipped.tax_id or '-'} {skipped.name}")

        if result.rejected:
            print("\nRefused transitions:")
            for rejected in result.rejected:
                print(f"  {rejected.company_id}/{rejected.template_key}: {rejected.reason}")

        return 0

    def _cmd_payroll(self, args: argparse.Namespace) -> int:
        """Calculate and print payroll for a period."""
        settings = get_settings()
        period_key = period_storage_key(args.period)

        with sync_session(self._get_engine()) as session:
            directory = DirectoryRepository(session)
            engine = CompensationEngine(
                directory.list_kpi_rules(),
                overrides=directory.list_rule_overrides(),
                default_percentages={Role.CHIEF_ACCOUNTANT: settings.chief_accountant_percent},
            )
            ledger = engine.calculate_period(
                period_key,
                directory.list_companies(),
                directory.list_staff(),
                metrics=directory.metrics_for_period(period_key),
                adjustments=directory.adjustments_for_period(period_key),
                include_inactive=args.include_inactive,
            )

        if args.json:
            payload = {
                "period": ledger.period,
                "grand_total": ledger.grand_total,
                "staff": [
                    {
                        "staff_id": s.staff_id,
                        "staff_name": s.staff_name,
                        "company_count": s.company_count,
                        "base_total": s.base_total,
                        "kpi_bonus": s.kpi_bonus,
                        "kpi_penalty": s.kpi_penalty,
                        "adjustments": s.adjustments,
                        "total": s.total,
                    }
                    for s in ledger.summaries.values()
                ],
            }
            print(json.dumps(payload, default=_json_default, ensure_ascii=False, indent=2))
            return 0

        print(f"Payroll for {format_period(ledger.period)}")
        print("=" * 72)
        print(f"{'Staff':<28}{'Companies':>10}{'Base':>12}{'KPI':>10}{'Total':>12}")
        for s in ledger.summaries.values():
            kpi = s.kpi_bonus + s.kpi_penalty
            print(
                f"{(s.staff_name or s.staff_key)[:27]:<28}{s.company_count:>10}"
                f"{s.base_total:>12,.2f}{kpi:>10,.2f}{s.total:>12,.2f}"
            )
        print("=" * 72)
        print(f"{'Grand total':<60}{ledger.grand_total:>12,.2f}")
        return 0

    def _cmd_periods(self, args: argparse.Namespace) -> int:
        """List the month labels of a year."""
        for label in available_periods(args.year, args.year):
            print(f"{period_storage_key(label)}  {label}")
        return 0


def main() -> int:
    """CLI entry point."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cli = FilingCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
