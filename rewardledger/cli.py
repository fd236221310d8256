from __future__ import annotations

import argparse
import logging
import sys

from rewardledger._types import ActivityKind
from rewardledger.config import DATA_FILE
from rewardledger.engine import RewardEngine
from rewardledger.formatting import format_stats
from rewardledger.ledger import PaymentConfirmation
from rewardledger.logging_setup import setup_logger
from rewardledger.notifications import EventTopic, Notification
from rewardledger.persistence import JsonFileGateway


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rewardledger",
        description="Reward Ledger: productivity currency CLI",
    )
    parser.add_argument(
        "--data", default=DATA_FILE, help=f"Ledger file (default: {DATA_FILE})"
    )
    parser.add_argument("--log-file", default=None, help="Log file path")
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Do not print notifications"
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("stats", help="Show balance, counters and recent history")

    track = sub.add_parser("track", help="Report activity")
    track.add_argument(
        "kind",
        choices=[k.value for k in ActivityKind],
        help="Activity kind",
    )
    track.add_argument("count", type=int, nargs="?", default=1, help="Incremental count")

    earn = sub.add_parser("earn", help="Grant a bonus outside the threshold rules")
    earn.add_argument("amount", type=float)
    earn.add_argument("reason", nargs="?", default="")

    spend = sub.add_parser("spend", help="Spend CC")
    spend.add_argument("amount", type=float)
    spend.add_argument("reason", nargs="?", default="")

    purchase = sub.add_parser("purchase", help="Credit a confirmed CC purchase")
    purchase.add_argument("package", help="Package id (small, medium, large)")
    purchase.add_argument(
        "--status", default="successful", help="Payment gateway status"
    )
    purchase.add_argument("--reference", default="", help="Gateway transaction reference")

    hydrate = sub.add_parser("hydrate", help="Log water intake")
    hydrate.add_argument("units", type=int, nargs="?", default=1)

    quiz = sub.add_parser("quiz", help="Record a finished quiz")
    quiz.add_argument("correct", type=int)
    quiz.add_argument("total", type=int)

    reset = sub.add_parser("reset", help="Erase all ledger data")
    reset.add_argument("--yes", action="store_true", help="Confirm the reset")

    csv_p = sub.add_parser("export-csv", help="Export transactions as CSV")
    csv_p.add_argument("path")

    json_p = sub.add_parser("export-json", help="Export stats and transactions as JSON")
    json_p.add_argument("path")

    plot = sub.add_parser("plot", help="Plot balance history (PNG)")
    plot.add_argument("path")

    return parser


def build_engine(data_path: str) -> RewardEngine:
    return RewardEngine(gateway=JsonFileGateway(data_path))


def _print_notification(note: Notification) -> None:
    print(f"[{note.severity.value}] {note.message}")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    setup_logger(args.log_file)
    logging.getLogger(__name__).debug("Command %s on %s", args.command, args.data)

    engine = build_engine(args.data)
    if not args.quiet:
        engine.subscribe(EventTopic.NOTIFICATION, _print_notification)
    engine.boot()

    ok = True
    if args.command == "stats":
        print(format_stats(engine.get_stats(), engine.daily_goals_status()))

    elif args.command == "track":
        earned = engine.track_activity(args.kind, args.count)
        print(f"Tracked {args.kind} +{args.count}; earned {earned:.2f} CC")

    elif args.command == "earn":
        ok = engine.earn_cc(args.amount, args.reason)

    elif args.command == "spend":
        ok = engine.spend_cc(args.amount, args.reason)

    elif args.command == "purchase":
        confirmation = PaymentConfirmation(args.package, args.status, args.reference)
        ok = engine.purchase_cc(args.package, confirmation)

    elif args.command == "hydrate":
        ok = engine.record_hydration(args.units)

    elif args.command == "quiz":
        perfect = engine.record_quiz_result(args.correct, args.total)
        print("Perfect score!" if perfect else f"Score {args.correct}/{args.total}")

    elif args.command == "reset":
        if not args.yes:
            print("Refusing to reset without --yes")
        ok = engine.reset(confirmed=args.yes)

    elif args.command == "export-csv":
        from rewardledger.export import export_csv
        export_csv(engine.state.transactions, args.path)
        print(f"CSV exported to {args.path}")

    elif args.command == "export-json":
        from rewardledger.export import export_json
        export_json(engine.get_stats(), engine.state.transactions, args.path)
        print(f"JSON exported to {args.path}")

    elif args.command == "plot":
        from rewardledger.visualization import plot_history
        plot_history(engine.state.transactions, engine.get_balance(), args.path)
        print(f"Plot saved to {args.path}")

    if args.command != "stats":
        print(f"Balance: {engine.get_balance():.2f} CC")
    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
