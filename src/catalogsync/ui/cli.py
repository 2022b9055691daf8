from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from catalogsync.app import import_artist_from_config
from catalogsync.config import ConfigurationError, configure_logging, load_environment
from catalogsync.domain.errors import ArtistNotFoundError, ImportCancelled
from catalogsync.domain.release_filter import FilterOptions
from catalogsync.domain.sync import choose_first

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from catalogsync.adapters.musicbrainz.schema import MusicBrainzArtist
    from catalogsync.domain.sync import ArtistChooser

log = logging.getLogger(__name__)

USAGE = (
    'catalogsync "Artist Name" [--include-mixtapes] [--include-compilations] '
    "[--dry-run] [--yes] [-v]"
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalogsync",
        usage=USAGE,
        description="Import an artist's studio albums from MusicBrainz into the catalog",
    )
    parser.add_argument("artist", nargs="*", help="Artist name to search for")
    parser.add_argument(
        "--include-mixtapes",
        action="store_true",
        help='Also import albums tagged "Mixtape/Street"',
    )
    parser.add_argument(
        "--include-compilations",
        action="store_true",
        help='Also import albums tagged "Compilation"',
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve and report everything without writing to the catalog",
    )
    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Take the best-scored artist candidate without prompting",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _describe(candidate: MusicBrainzArtist) -> str:
    details = [
        value
        for value in (
            candidate.type,
            candidate.country,
            candidate.life_span.begin if candidate.life_span else None,
            candidate.disambiguation,
        )
        if value
    ]
    suffix = f" [{' · '.join(details)}]" if details else ""
    return f"{candidate.name}{suffix} score={candidate.score if candidate.score is not None else '?'}"


def prompt_chooser(
    *,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], object] = print,
) -> ArtistChooser:
    """Interactive picker: Enter takes the first candidate, 0 cancels."""

    def choose(candidates: Sequence[MusicBrainzArtist]) -> MusicBrainzArtist | None:
        if len(candidates) == 1:
            return candidates[0]
        output_fn("Multiple MusicBrainz artists matched:")
        for index, candidate in enumerate(candidates, start=1):
            output_fn(f"  {index}. {_describe(candidate)}")
        while True:
            answer = input_fn(f"Pick 1-{len(candidates)} (Enter = 1, 0 = cancel): ").strip()
            if not answer:
                return candidates[0]
            if answer.isdigit():
                picked = int(answer)
                if picked == 0:
                    return None
                if picked <= len(candidates):
                    return candidates[picked - 1]
            output_fn(f"Invalid choice: {answer!r}")

    return choose


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parser = _build_parser()
    parsed_args = parser.parse_args(args_list)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    query = " ".join(parsed_args.artist).strip()
    if not query:
        parser.print_usage(sys.stderr)
        sys.exit(1)

    load_environment()
    options = FilterOptions(
        include_mixtapes=parsed_args.include_mixtapes,
        include_compilations=parsed_args.include_compilations,
    )
    chooser = choose_first if parsed_args.yes else prompt_chooser()

    try:
        report = import_artist_from_config(
            query,
            options=options,
            dry_run=parsed_args.dry_run,
            chooser=chooser,
        )
    except ImportCancelled:
        log.info("Cancelled.")
        sys.exit(0)
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(1)
    except ArtistNotFoundError as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Import failed")
        sys.exit(1)

    if options.include_mixtapes or options.include_compilations:
        log.info(
            "Options: include_mixtapes=%s, include_compilations=%s",
            options.include_mixtapes,
            options.include_compilations,
        )
    if report.dry_run:
        log.info("Dry run: nothing was written.")


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
