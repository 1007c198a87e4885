"""Parimutuel CLI entry point."""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

env_file = Path(__file__).parent.parent / ".env"
load_dotenv(env_file)

from parimutuel import __version__
from parimutuel.config import get_settings
from parimutuel.market import MarketError, format_deadline, utc_now
from parimutuel.market.factory import create_market
from parimutuel.services.custody import CustodyError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)

CONFIG_TEMPLATE = """# Parimutuel Configuration
# Operational parameters for a single pari-mutuel market.
# Secrets (e.g. LOGFIRE_TOKEN) belong in .env, not here.

market:
  creator: ""
  deadline: ""            # "YYYY-MM-DD HH:MM" in UTC, empty for no deadline
  rounding_policy: remainder_to_last   # remainder_to_last | floor | legacy_float
  max_stake: 2147483647

custody:
  paper_mode: true
  currency: IOTA
  transfer_fee: 1
  initial_treasury: 0
"""


def _init_logfire() -> None:
    """Initialize Logfire if available, without failing commands."""
    try:
        from parimutuel.observability import initialize_logfire

        initialize_logfire(get_settings())
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


def _now(args: argparse.Namespace) -> int:
    return args.now if args.now is not None else utc_now()


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize data directory structure and configuration file."""
    data_dir = Path(args.data_dir or "data").resolve()

    try:
        (data_dir / "payouts").mkdir(parents=True, exist_ok=True)
        logger.info(f"Created data directory: {data_dir}")

        config_path = data_dir / "config.yaml"
        if not config_path.exists():
            config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
            logger.info(f"Created config template: {config_path}")
        else:
            logger.info(f"Config file already exists: {config_path}")

        print(f"\n✓ Data directory initialized at {data_dir}")
        print("\nNext steps:")
        print("1. Set market.creator in data/config.yaml")
        print("2. Run 'python -m parimutuel open --caller <creator>' to open the market\n")
        return 0

    except Exception as e:
        logger.error(f"Failed to initialize: {e}")
        print(f"\n❌ Initialization failed: {e}\n")
        return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Display merged configuration."""
    try:
        settings = get_settings()

        print("\n=== Parimutuel Configuration ===\n")
        print(f"Data Directory: {settings.data_dir}\n")

        print("Market:")
        print(f"  Creator: {settings.market.creator or '(not set)'}")
        print(f"  Deadline: {settings.market.deadline or '(none)'}")
        print(f"  Rounding Policy: {settings.market.rounding_policy}")
        print(f"  Max Stake: {settings.market.max_stake:,}\n")

        print("Custody:")
        print(f"  Paper Mode: {settings.custody.paper_mode}")
        print(f"  Currency: {settings.custody.currency}")
        print(f"  Transfer Fee: {settings.custody.transfer_fee}\n")

        print(f"Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")
        return 0

    except ValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1
    except Exception as e:
        logger.error(f"Failed to load config: {e}")
        print(f"\n❌ Failed to load configuration: {e}\n")
        return 1


def cmd_status(args: argparse.Namespace) -> int:
    """Display market status, pool and settlement."""
    try:
        market, custody = create_market(get_settings())
        state = market.snapshot()
        totals = market.outcome_totals()

        print("\n=== Market Status ===\n")
        print(f"Status: {market.status}")
        print(f"Creator: {state.creator or market.creator}")
        print(f"Deadline: {format_deadline(state.deadline)}")
        print(f"Pool: {sum(totals.values()):,} {custody.config.currency}\n")

        print("Totals per outcome:")
        if totals:
            for outcome, amount in sorted(totals.items()):
                print(f"  {outcome}: {amount:,}")
        else:
            print("  (None)")
        print()

        if state.stranded:
            stranded = sum(s.amount for s in state.stranded)
            print(f"Stranded late bets: {len(state.stranded)} ({stranded:,} {custody.config.currency})\n")

        if state.settlement:
            print(f"Winning outcome: {state.settlement.winning_outcome}")
            for bettor, amount in sorted(state.settlement.payouts.items()):
                print(f"  {bettor}: {amount:,}")
            for bettor, amount in sorted(state.settlement.failed.items()):
                print(f"  ✗ transfer failed: {bettor} ({amount:,})")
            print()
        return 0

    except (MarketError, ValueError) as e:
        logger.error(f"Failed to read status: {e}")
        print(f"\n❌ Failed to read status: {e}\n")
        return 1


def cmd_open(args: argparse.Namespace) -> int:
    """Initialize the market (creator only)."""
    _init_logfire()
    try:
        settings = get_settings()
        market, _ = create_market(settings)
        deadline = args.deadline if args.deadline is not None else settings.market.deadline
        state = market.initialize(args.caller, deadline)

        print(f"\n✓ Market open (deadline: {format_deadline(state.deadline)})\n")
        return 0

    except (MarketError, ValueError) as e:
        logger.error(f"Open failed: {e}")
        print(f"\n❌ Open failed: {e}\n")
        return 1


def cmd_bet(args: argparse.Namespace) -> int:
    """Place or replace a wager."""
    _init_logfire()
    try:
        market, custody = create_market(get_settings())
        custody.receive(args.caller, args.amount)
        result = market.place_bet(args.caller, args.outcome, args.amount, _now(args))

        if not result.accepted:
            print(f"\n✗ {result}\n")
            return 1

        print(f"\n✓ {result}")
        if result.replaced:
            print(f"  (replaced {result.replaced.amount} on {result.replaced.outcome!r})")
        print()
        return 0

    except (MarketError, CustodyError, ValueError) as e:
        logger.error(f"Bet failed: {e}")
        print(f"\n❌ Bet failed: {e}\n")
        return 1


def cmd_close(args: argparse.Namespace) -> int:
    """Close the market and pay out winners (creator only)."""
    _init_logfire()
    try:
        market, custody = create_market(get_settings())
        report = market.close_market(args.caller, args.outcome, _now(args))
        settlement = report.settlement
        currency = custody.config.currency

        print("\n=== Market Closed ===\n")
        print(f"Winning outcome: {settlement.winning_outcome}")
        print(f"Pool: {settlement.total_pool:,} {currency}")
        print(f"Paid: {settlement.total_paid:,} {currency} (retained {settlement.retained:,})\n")

        for outcome in report.dispatch.outcomes:
            mark = "✓" if outcome.success else "✗"
            detail = outcome.transfer_id if outcome.success else outcome.error
            print(f"  {mark} {outcome.bettor}: {outcome.amount:,} ({detail})")
        print()

        return 1 if report.dispatch.failed else 0

    except (MarketError, ValueError) as e:
        logger.error(f"Close failed: {e}")
        print(f"\n❌ Close failed: {e}\n")
        return 1


def cmd_wagers(args: argparse.Namespace) -> int:
    """List recorded wagers."""
    try:
        market, _ = create_market(get_settings())
        wagers = market.wagers()

        print(f"\nWagers: {len(wagers)}")
        for wager in wagers:
            print(f"  {wager.bettor}: {wager.amount:,} on {wager.outcome!r}")
        print()
        return 0

    except (MarketError, ValueError) as e:
        logger.error(f"Failed to list wagers: {e}")
        print(f"\n❌ Failed to list wagers: {e}\n")
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Parimutuel: single-event pari-mutuel prediction market",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Parimutuel {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_init = subparsers.add_parser(
        "init",
        help="Initialize data directory and configuration file",
    )
    parser_init.add_argument("--data-dir", help="Data directory (default: ./data)")
    parser_init.set_defaults(func=cmd_init)

    parser_config = subparsers.add_parser(
        "config",
        help="Display merged configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    parser_status = subparsers.add_parser(
        "status",
        help="Display market status",
    )
    parser_status.set_defaults(func=cmd_status)

    parser_open = subparsers.add_parser(
        "open",
        help="Initialize the market (creator only)",
    )
    parser_open.add_argument("--caller", required=True, help="Calling identity")
    parser_open.add_argument(
        "--deadline",
        help="Betting deadline 'YYYY-MM-DD HH:MM' (UTC); overrides market.deadline",
    )
    parser_open.set_defaults(func=cmd_open)

    parser_bet = subparsers.add_parser(
        "bet",
        help="Place or replace a wager",
    )
    parser_bet.add_argument("--caller", required=True, help="Bettor identity")
    parser_bet.add_argument("--outcome", required=True, help="Outcome label, e.g. 'yes'")
    parser_bet.add_argument("--amount", required=True, type=int, help="Stake in the smallest currency unit")
    parser_bet.add_argument("--now", type=int, help="Override the clock (epoch seconds)")
    parser_bet.set_defaults(func=cmd_bet)

    parser_close = subparsers.add_parser(
        "close",
        help="Close the market and pay winners (creator only)",
    )
    parser_close.add_argument("--caller", required=True, help="Calling identity")
    parser_close.add_argument("--outcome", required=True, help="Winning outcome label")
    parser_close.add_argument("--now", type=int, help="Override the clock (epoch seconds)")
    parser_close.set_defaults(func=cmd_close)

    parser_wagers = subparsers.add_parser(
        "wagers",
        help="List recorded wagers",
    )
    parser_wagers.set_defaults(func=cmd_wagers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
