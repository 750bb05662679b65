"""
Learnopoly — Interaction Script
=================================

CLI for driving a Learnopoly ledger snapshot from the terminal.

Usage:
    poetry run python interact.py --caller <addr> create-profile alice "Bio" --skill python --skill rust
    poetry run python interact.py --caller <addr> update-profile alice "New bio" --skill go
    poetry run python interact.py --caller <admin> reputation <addr> 10
    poetry run python interact.py --caller <addr> create-course "Blockchain 101" "Intro"
    poetry run python interact.py --caller <addr> enroll 0
    poetry run python interact.py --caller <addr> post "Hello Learnopoly!"
    poetry run python interact.py --caller <addr> like 0
    poetry run python interact.py --caller <addr> connect <other-addr>
    poetry run python interact.py show <addr>
    poetry run python interact.py course 0
    poetry run python interact.py events --since 3

Environment:
    Reads .env for LEARNOPOLY_STATE_PATH and LEARNOPOLY_ADMIN.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from algosdk import encoding
from dotenv import load_dotenv

from ledger_engine import Ledger, LedgerError, LedgerStore

# ─────────────────────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────────────────────
logger = logging.getLogger("learnopoly")

MUTATING_COMMANDS = {
    "create-profile",
    "update-profile",
    "reputation",
    "create-course",
    "enroll",
    "post",
    "like",
    "connect",
}


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────
def _address(value: str) -> str:
    """argparse type for Algorand addresses."""
    if not encoding.is_valid_address(value):
        raise argparse.ArgumentTypeError(f"not a valid Algorand address: {value}")
    return value


def _open_store(state: str | None) -> LedgerStore:
    load_dotenv(Path(__file__).parent / ".env")
    path = state or os.getenv("LEARNOPOLY_STATE_PATH") or str(Path(__file__).parent / "ledger_state.json")
    return LedgerStore(path)


def _account_view(ledger: Ledger, address: str) -> dict:
    """Everything the ledger knows about one address."""
    return {
        "profile": ledger.profile(address).model_dump(),
        "enrollments": ledger.get_user_enrollments(address),
        "connections": ledger.get_user_connections(address),
        "posts": [p.id for p in ledger.posts() if p.author == address],
    }


# ─────────────────────────────────────────────────────────────────────────────
# Core actions
# ─────────────────────────────────────────────────────────────────────────────
def apply_command(ledger: Ledger, args: argparse.Namespace) -> object:
    """Run one parsed command against ``ledger`` and return what to print."""
    caller = args.caller
    command = args.command

    if command == "create-profile":
        ledger.create_profile(caller, args.username, args.bio, args.skill)
        return ledger.profile(caller).model_dump()
    if command == "update-profile":
        ledger.update_profile(caller, args.username, args.bio, args.skill)
        return ledger.profile(caller).model_dump()
    if command == "reputation":
        ledger.increase_reputation(caller, args.target, args.amount)
        return ledger.profile(args.target).model_dump()
    if command == "create-course":
        course_id = ledger.create_course(caller, args.title, args.description)
        return ledger.course(course_id).model_dump()
    if command == "enroll":
        ledger.enroll_in_course(caller, args.course_id)
        return {"course_ids": ledger.get_user_enrollments(caller)}
    if command == "post":
        post_id = ledger.create_post(caller, args.content)
        return ledger.post(post_id).model_dump()
    if command == "like":
        ledger.like_post(caller, args.post_id)
        return ledger.post(args.post_id).model_dump()
    if command == "connect":
        ledger.add_connection(caller, args.other)
        return {"connections": ledger.get_user_connections(caller)}
    if command == "show":
        return _account_view(ledger, args.address)
    if command == "course":
        return ledger.course(args.course_id).model_dump()
    if command == "events":
        return [e.model_dump(mode="json") for e in ledger.events(args.since)]
    raise ValueError(f"Unknown command: {command}")


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="interact",
        description="Learnopoly — ledger interaction CLI",
    )
    parser.add_argument(
        "--state",
        type=str,
        default=None,
        help="Path to the ledger snapshot (default: LEARNOPOLY_STATE_PATH)",
    )
    parser.add_argument(
        "--caller",
        type=_address,
        default=None,
        help="Address performing the operation (required for mutations)",
    )
    parser.add_argument(
        "--admin",
        type=_address,
        default=None,
        help="Administrator for a new snapshot (default: LEARNOPOLY_ADMIN)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ── profiles ─────────────────────────────────────────────────────
    for name, help_text in (
        ("create-profile", "Create the caller's profile"),
        ("update-profile", "Replace the caller's username, bio and skills"),
    ):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("username", type=str)
        p.add_argument("bio", type=str)
        p.add_argument("--skill", action="append", default=[], help="Repeat for each skill")

    rep_parser = subparsers.add_parser("reputation", help="Increase reputation (administrator only)")
    rep_parser.add_argument("target", type=_address)
    rep_parser.add_argument("amount", type=int)

    # ── courses ──────────────────────────────────────────────────────
    course_parser = subparsers.add_parser("create-course", help="Create a course")
    course_parser.add_argument("title", type=str)
    course_parser.add_argument("description", type=str)

    enroll_parser = subparsers.add_parser("enroll", help="Enroll the caller in a course")
    enroll_parser.add_argument("course_id", type=int)

    # ── social ───────────────────────────────────────────────────────
    post_parser = subparsers.add_parser("post", help="Publish a post")
    post_parser.add_argument("content", type=str)

    like_parser = subparsers.add_parser("like", help="Like a post")
    like_parser.add_argument("post_id", type=int)

    connect_parser = subparsers.add_parser("connect", help="Connect the caller with another address")
    connect_parser.add_argument("other", type=_address)

    # ── reads ────────────────────────────────────────────────────────
    show_parser = subparsers.add_parser("show", help="Show profile, enrollments, connections and posts")
    show_parser.add_argument("address", type=_address)

    read_course_parser = subparsers.add_parser("course", help="Show one course")
    read_course_parser.add_argument("course_id", type=int)

    events_parser = subparsers.add_parser("events", help="List ledger transitions")
    events_parser.add_argument("--since", type=int, default=0)

    return parser


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in MUTATING_COMMANDS and args.caller is None:
        parser.error(f"--caller is required for '{args.command}'")

    try:
        store = _open_store(args.state)
        ledger = store.load(administrator=args.admin or os.getenv("LEARNOPOLY_ADMIN") or None)

        output = apply_command(ledger, args)
        if args.command in MUTATING_COMMANDS:
            store.save(ledger)

        print(json.dumps(output, indent=2, ensure_ascii=False))

    except LedgerError as exc:
        logger.error("❌ %s rejected: %s", args.command, exc.reason)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("\nInterrupted by user.")
        sys.exit(130)
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
