#!/usr/bin/env python3
"""
Unified entry point for the checkout resolver.

Usage:
    python darts_checkout.py 121                     # Ranked checkouts, saved mode
    python darts_checkout.py 60 --mode single_out    # Another finishing rule
    python darts_checkout.py 100 --limit 3           # Top three only
    python darts_checkout.py --bogeys --mode master_out
    python darts_checkout.py --ui tui                # Terminal (Textual)
    python darts_checkout.py --ui web --port 8080    # Browser (Flask)

Individual entry points (tui.py, web.py) still work independently.
"""
import argparse
import logging
import sys

from board import describe_rule, max_score, parse_rule, rule_arg
from checkout import find_checkouts, format_path
from checkout_tables import BOGEY_NUMBERS
from settings import load_settings


def parse_args(argv=None):
    """Parse command-line arguments for the plain CLI.

    Args:
        argv: Optional list of args (for testing). None uses sys.argv.

    Returns:
        Parsed argparse.Namespace.
    """
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Darts checkout finder")
    parser.add_argument("score", nargs="?", type=int, help="Remaining score")
    parser.add_argument("--mode", type=rule_arg, default=parse_rule(settings["mode"]),
                        help="single_out, master_out or double_out "
                             f"(default: {settings['mode']})")
    parser.add_argument("--limit", type=int, default=settings["max_paths"],
                        help=f"Paths to print (default: {settings['max_paths']})")
    parser.add_argument("--bogeys", action="store_true",
                        help="List scores with no checkout under the mode")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)
    if args.score is None and not args.bogeys:
        parser.error("a score is required unless --bogeys is given")
    if args.limit < 1:
        parser.error("--limit must be positive")
    return args


def run_cli(argv=None, out=None):
    """Print ranked checkouts (or bogey numbers) and return an exit code."""
    args = parse_args(argv)
    out = out or sys.stdout
    logging.basicConfig(level=args.log_level.upper())

    if args.bogeys:
        bogeys = ", ".join(str(s) for s in BOGEY_NUMBERS[args.mode])
        print(f"Bogey numbers, {describe_rule(args.mode)}: {bogeys}", file=out)
        return 0

    paths = find_checkouts(args.score, args.mode)
    print(f"{args.score} — {describe_rule(args.mode)}", file=out)
    if not paths:
        if not 1 <= args.score <= max_score(args.mode):
            print(f"No checkout: score must be 1-{max_score(args.mode)}", file=out)
        else:
            print("No checkout", file=out)
        return 1

    width = len(str(min(len(paths), args.limit)))
    for i, path in enumerate(paths[:args.limit], start=1):
        print(f"{i:>{width}}. {format_path(path)}", file=out)
    if len(paths) > args.limit:
        print(f"... {len(paths) - args.limit} more", file=out)
    return 0


def main():
    # Pre-parse just the --ui flag, pass everything else through
    parser = argparse.ArgumentParser(
        description="Darts checkout — command line, terminal, or browser",
        add_help=False,
    )
    parser.add_argument("--ui", choices=["cli", "tui", "web"], default="cli",
                        help="Interface: cli (default), tui (terminal), web (browser)")
    args, remaining = parser.parse_known_args()

    if args.ui == "cli":
        sys.exit(run_cli(remaining))

    elif args.ui == "tui":
        from tui import main as run_tui
        run_tui(remaining)

    elif args.ui == "web":
        from web import main as run_web
        run_web(remaining)


if __name__ == "__main__":
    main()
