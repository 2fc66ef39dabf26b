# main.py
import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from core.reporting.excel import FinancialExcelRenderer
from infra.db.base import SessionLocal, db_url
from infra.logging_config import setup_logging
from infra.migrate import run_migrations
from infra.operational_support import bind_trace_id
from infra.services import ServiceGraph, build_service_graph

logger = logging.getLogger(__name__)


def build_services() -> ServiceGraph:
    # same DB the engine in infra.db.base points at
    run_migrations(db_url=db_url)
    session = SessionLocal()
    return build_service_graph(session)


def _parse_args(argv):
    parser = argparse.ArgumentParser(prog="stage-ledger", description="Stage ledger back office")
    sub = parser.add_subparsers(dest="command", required=True)

    summary = sub.add_parser("summary", help="print the financial summary")
    summary.add_argument("--scope", default="general", choices=("month", "year", "general"))
    summary.add_argument("--anchor", type=date.fromisoformat, default=None)
    summary.add_argument("--consultant", default=None)

    export = sub.add_parser("export", help="write the financial workbook (.xlsx)")
    export.add_argument("output", type=Path)
    export.add_argument("--scope", default="general", choices=("month", "year", "general"))
    export.add_argument("--anchor", type=date.fromisoformat, default=None)
    export.add_argument("--period", default="month", choices=("month", "week"))
    return parser.parse_args(argv)


def main(argv=None) -> int:
    setup_logging()
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    with bind_trace_id():
        services = build_services()
        try:
            fs = services.financial_service
            if args.command == "summary":
                s = fs.get_summary(scope=args.scope, anchor=args.anchor, consultant_id=args.consultant)
                print(f"Total expected:              {s.total_expected:>14,.2f}")
                print(f"Total received:              {s.total_received:>14,.2f}")
                print(f"Total pending:               {s.total_pending:>14,.2f}")
                print(f"Consultant payments made:    {s.consultant_payments_made:>14,.2f}")
                print(f"Consultant payments pending: {s.consultant_payments_pending:>14,.2f}")
                print(f"Projects net value:          {s.projects_net_value:>14,.2f}")
            else:
                snapshot = fs.get_snapshot(scope=args.scope, anchor=args.anchor, period=args.period)
                out = FinancialExcelRenderer().render(
                    snapshot,
                    args.output,
                    history=fs.list_accounts_history(),
                )
                logger.info("Financial workbook written to %s", out)
                print(out)
        finally:
            services.session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
