"""Command-line entry point running a raffle from CSV or database input."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from .config import Settings, load_settings
from .db.engine import get_sessionmaker, init_db, make_engine
from .draw.items import RaffleItem
from .sources import RaffleSinkError, RaffleSourceError, read_items_csv, write_results_csv
from .workflows import load_items, record_results, register_items, run_raffle

logger = logging.getLogger(__name__)

InputFunc = Callable[[str], str]


def make_pause(prompt: str, input_func: InputFunc = input) -> Callable[[], None]:
    """Return a hook that blocks until the operator presses Enter."""

    def pause() -> None:
        try:
            input_func(prompt)
        except EOFError:
            logger.debug("Input closed; continuing without waiting")

    return pause


def make_keep_eligible(input_func: InputFunc = input) -> Callable[[str, RaffleItem], bool]:
    """Return a hook asking each winner whether they stay in later draws.

    Anything other than ``yes`` (case-insensitive) opts the winner out,
    including closed input.
    """

    def keep_eligible(winner: str, item: RaffleItem) -> bool:
        try:
            answer = input_func(
                f"Would you like to remain in the following drawings, {winner}? (yes/no): "
            )
        except EOFError:
            answer = ""
        return answer.strip().lower() == "yes"

    return keep_eligible


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wraffle",
        description="Run a weighted raffle that favours participants with fewer wins.",
    )
    parser.add_argument("--input", default=settings.input_path, help="CSV file with raffle items")
    parser.add_argument("--output", default=settings.output_path, help="CSV file for the results")
    parser.add_argument("--seed", type=int, default=settings.seed, help="Seed for reproducible draws")
    parser.add_argument("--db-url", default=settings.db_url, help="Database URL for --from-db/--to-db")
    parser.add_argument(
        "--from-db", action="store_true", help="Read items from the database instead of --input"
    )
    parser.add_argument(
        "--to-db", action="store_true", help="Also store items and results in the database"
    )
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Never prompt; every winner stays eligible",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stdout,
    )


def _read_items(args, session_factory) -> List[RaffleItem]:
    if args.from_db:
        with session_factory() as session:
            return load_items(session)
    return read_items_csv(args.input)


def _write_results(args, session_factory, run) -> None:
    write_results_csv(args.output, run.items, run.winners)
    if args.to_db:
        with session_factory.begin() as session:
            if not args.from_db:
                register_items(session, run.items)
            record_results(session, run.items, run.winners)


def main(argv: Optional[Sequence[str]] = None, input_func: InputFunc = input) -> int:
    """Run the raffle end to end. Returns the process exit status."""
    try:
        settings = load_settings()
    except ValueError as exc:
        logger.critical(f"Error loading settings: {exc}")
        return 1
    args = build_parser(settings).parse_args(argv)
    _configure_logging(args.log_level)

    engine = None
    session_factory = None
    try:
        try:
            if args.from_db or args.to_db:
                engine = make_engine(args.db_url)
                init_db(engine)
                session_factory = get_sessionmaker(engine)
            items = _read_items(args, session_factory)
        except (RaffleSourceError, SQLAlchemyError) as exc:
            logger.critical(f"Error reading raffle items: {exc}")
            return 1

        if args.non_interactive:
            start = pause = None
            keep_eligible = None
        else:
            start = make_pause("Press Enter to start the raffle:", input_func)
            pause = make_pause("Press Enter to reveal the winner...", input_func)
            keep_eligible = make_keep_eligible(input_func)

        try:
            run = run_raffle(
                items,
                seed=args.seed,
                start=start,
                pause=pause,
                keep_eligible=keep_eligible,
            )
        except ValueError as exc:
            logger.critical(f"Error running weighted raffle: {exc}")
            return 1

        try:
            _write_results(args, session_factory, run)
        except (RaffleSinkError, SQLAlchemyError) as exc:
            logger.critical(f"Error writing raffle results: {exc}")
            return 1
    finally:
        if engine is not None:
            engine.dispose()

    logger.info(f"Results written to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
