"""
Resolve a deck into printable card images from the command line.

Examples:
    python -m proxyprinter.jobs.print_deck --deck-url https://archidekt.com/decks/123456
    python -m proxyprinter.jobs.print_deck --deck-file deck.txt --language de \\
        --token-copies 2 --group-tokens --output deck.json --images-dir images/
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from proxyprinter.api.decks import DeckResponse
from proxyprinter.clients.transport import HttpTransport
from proxyprinter.config import settings
from proxyprinter.models.deck import DeckDetails
from proxyprinter.models.failure import FailureKind, UsageError
from proxyprinter.models.progress import ProgressEvent, ProgressStage
from proxyprinter.services.deck_processor import DeckProcessor, ResolveOptions
from proxyprinter.services.image_download import ImageDownloader

logger = logging.getLogger(__name__)

STAGE_LABELS = {
    ProgressStage.RESOLVE_CARDS: "(1/2) Get deck details",
    ProgressStage.DOWNLOAD_IMAGES: "(2/2) Download images",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proxyprinter",
        description="Resolve a deck into printable card images.",
    )
    parser.add_argument("--deck-url", help="URL link to deck")
    parser.add_argument("--deck-file", type=Path, help="Filepath to exported deck")
    parser.add_argument("--language", help="Set language for all cards to print")
    parser.add_argument(
        "--token-copies", type=int, default=None, help="Number of copies for each token"
    )
    parser.add_argument(
        "--group-tokens", action="store_true", help="Group tokens based on the name"
    )
    parser.add_argument(
        "--include-emblems",
        action="store_true",
        help="Include emblems attached to the cards",
    )
    parser.add_argument("--output", type=Path, help="Write the resolved deck as JSON here")
    parser.add_argument("--images-dir", type=Path, help="Download card images into this folder")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def options_from_args(args: argparse.Namespace) -> ResolveOptions:
    """
    Raises:
        UsageError: If no deck reference is given or a token count is out of range
    """
    if not args.deck_url and args.deck_file is None:
        raise UsageError(
            kind=FailureKind.MISSING_REQUIRED,
            message="You have to provide a path to an exported deck or a URL to your deck.",
            suggestion="Use --help to see more information.",
        )

    if args.token_copies is not None and not 0 < args.token_copies <= settings.max_token_copies:
        raise UsageError(
            kind=FailureKind.INVALID_INPUT,
            message=(
                "Number of copies for each token has to be between 1 and "
                f"{settings.max_token_copies}."
            ),
        )

    options = ResolveOptions(
        language_code=args.language,
        token_copies=args.token_copies or 0,
        group_tokens=args.group_tokens,
        include_emblems=args.include_emblems,
    )
    options.validate()
    return options


def log_progress(event: ProgressEvent) -> None:
    """Console progress: stage banner at 0%, then percentages and errors."""
    if event.percent is not None:
        if event.percent == 0:
            logger.info(STAGE_LABELS[event.stage])
        logger.info("%s: %3.0f%%", event.stage.value, event.percent)
    if event.error_message is not None:
        logger.error(event.error_message)


def write_manifest(deck: DeckDetails, path: Path) -> None:
    """Dump the resolved deck as JSON."""
    manifest = DeckResponse.from_deck(deck).model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(manifest, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Wrote %s", path)


async def run(args: argparse.Namespace) -> int:
    """
    Run one deck through the whole pipeline.

    Returns:
        Process exit code: 0 on (possibly partial) success, 1 if no deck was found
    """
    options = options_from_args(args)
    card_list = None
    if args.deck_file is not None:
        try:
            card_list = args.deck_file.read_text(encoding="utf-8")
        except OSError as e:
            raise UsageError(
                kind=FailureKind.INVALID_INPUT,
                message=f"Cannot read deck file {args.deck_file}: {e}",
            ) from e

    async with HttpTransport() as transport:
        processor = DeckProcessor.create(transport)
        processor.subscribe(log_progress)

        deck = await processor.process(
            deck_url=args.deck_url,
            card_list=card_list,
            options=options,
        )
        if deck is None:
            logger.error("Deck could not be retrieved")
            return 1

        unresolved = deck.unresolved_cards()
        logger.info(
            "Deck %r: %d printable entries, %d unresolved",
            deck.name,
            len(deck.printable_cards()),
            len(unresolved),
        )

        if args.output is not None:
            write_manifest(deck, args.output)

        if args.images_dir is not None:
            downloader = ImageDownloader(transport, processor.progress)
            await downloader.download_deck(deck, args.images_dir)

    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return asyncio.run(run(args))
    except UsageError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        if e.suggestion:
            print(e.suggestion, file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
