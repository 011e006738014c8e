# src/cdsearch/cli.py

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path

from .config import SearchConfig
from .data_models import SearchResult
from .exceptions import ComplementSearchError
from .io_handlers import write_results_json
from .logging_config import setup_logging
from .pipeline import run_file_pipeline

logger = logging.getLogger(__name__)


def add_search_subcommand(subparsers: argparse._SubParsersAction) -> None:
    parser_search = subparsers.add_parser(
        "search",
        help="Search complement drugs for an initial drug.",
        description=(
            "Search drugs that complement an initial drug on a signed "
            "protein-protein interaction network."
        ),
    )

    # Input files
    parser_search.add_argument(
        "--interactions",
        type=str,
        required=True,
        help="TSV file with interactions (source protein, target protein, direction -1/0/1).",
    )
    parser_search.add_argument(
        "--drugs",
        type=str,
        required=True,
        help="TSV file with drugs (drug name, target protein, direction -1/0/1).",
    )
    parser_search.add_argument(
        "--disease-essential",
        type=str,
        default=None,
        help="File with disease-essential proteins, one per line.",
    )
    parser_search.add_argument(
        "--healthy-essential",
        type=str,
        default=None,
        help="File with healthy-essential proteins, one per line.",
    )
    parser_search.add_argument(
        "--initial",
        type=str,
        required=True,
        help="Name of the initial drug, or of its drug target.",
    )

    # Search parameters
    parser_search.add_argument(
        "--max-path-length",
        type=int,
        default=3,
        help="Maximum path length between drug targets and essential proteins (default: 3).",
    )
    parser_search.add_argument(
        "--n-solutions",
        type=int,
        default=10,
        help="Maximum number of solutions to return (default: 10).",
    )
    parser_search.add_argument(
        "--n-jobs",
        type=int,
        default=1,
        help="Number of worker threads used to resolve drug profiles (default: 1).",
    )

    # Output
    parser_search.add_argument(
        "--output-json",
        type=str,
        default=None,
        help=(
            "Output JSON file (overwritten if it exists). By default it is created "
            "next to the interactions file."
        ),
    )
    parser_search.add_argument(
        "--top-k",
        type=int,
        default=10,
        help="Number of top-ranked drugs to print (default: 10).",
    )
    parser_search.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO).",
    )
    parser_search.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional file to write the log to.",
    )

    parser_search.set_defaults(func=run_search_cli)


def run_search_cli(args: argparse.Namespace) -> None:
    setup_logging(args.log_level, args.log_file)

    cfg = SearchConfig(
        interactions_tsv=Path(args.interactions),
        drugs_tsv=Path(args.drugs),
        disease_essential_tsv=Path(args.disease_essential) if args.disease_essential else None,
        healthy_essential_tsv=Path(args.healthy_essential) if args.healthy_essential else None,
        output_json=Path(args.output_json) if args.output_json else None,
        initial=args.initial,
        max_path_length=args.max_path_length,
        n_solutions=args.n_solutions,
        n_jobs=args.n_jobs,
    )

    cancel_event = threading.Event()

    def _request_cancel(signum, frame):
        logger.warning("Interrupt received, stopping after the current drug.")
        cancel_event.set()

    previous_handler = signal.signal(signal.SIGINT, _request_cancel)
    try:
        result = run_file_pipeline(cfg, cancel_event=cancel_event)
    except (ComplementSearchError, ValueError) as exc:
        logger.error("%s", exc)
        raise SystemExit(1)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    output_path = cfg.output_json
    if output_path is None:
        output_path = cfg.default_output_path(
            result.initial.drug_name, result.initial.target_name
        )

    _print_and_save(result, args.top_k, output_path)


def _print_and_save(result: SearchResult, top_k: int, output_path: Path) -> None:
    df = result.to_frame()
    top_k = min(top_k, len(df))
    print(
        f"\nTop {top_k} complement drugs for {result.initial.drug_name} "
        f"(target {result.initial.target_name}):\n"
    )
    print(df.head(top_k).to_string(index=False))
    if result.cancelled:
        print("\nThe search was cancelled: only the drugs resolved before cancellation are ranked.")

    written = write_results_json(result, output_path)
    if written is not None:
        print(f"\nFull results saved to: {written.resolve()}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Complement Drug Search",
    )

    subparsers = parser.add_subparsers(
        title="subcommands",
        dest="subcommand",
        required=True,
    )

    add_search_subcommand(subparsers)

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main(sys.argv[1:])
