"""
Card image download.

Writes one file per printable side, named `<quantity>_<side name>.jpg` so
that downstream layout tools know how many copies to place.
"""

import logging
import re
from pathlib import Path

from proxyprinter.clients.transport import HttpTransport
from proxyprinter.models.card import CardEntry, CardSide
from proxyprinter.models.deck import DeckDetails
from proxyprinter.models.progress import ProgressReporter, ProgressStage

logger = logging.getLogger(__name__)

# Characters not allowed in file names on common filesystems
UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def image_filename(side: CardSide, quantity: int) -> str:
    """e.g. `2_Delver of Secrets.jpg`; split names become `Fire-Ice`."""
    name = side.name.replace(" // ", "-")
    name = UNSAFE_FILENAME_CHARS.sub("_", name).strip() or "card"
    return f"{quantity}_{name}.jpg"


def unique_path(path: Path) -> Path:
    """`path`, or `path` with a numeric suffix if the file already exists."""
    candidate = path
    counter = 2
    while candidate.exists():
        candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
        counter += 1
    return candidate


class ImageDownloader:
    """Downloads side images of a resolved deck into a folder."""

    def __init__(self, transport: HttpTransport, progress: ProgressReporter | None = None) -> None:
        self.transport = transport
        self.progress = progress or ProgressReporter()

    async def download_side(self, side: CardSide, quantity: int, folder: Path) -> Path | None:
        """Download one side image; returns the written path or None on failure."""
        if not side.image_url:
            logger.warning("Side %s has no image url", side.name)
            return None

        content = await self.transport.get_bytes(side.image_url)
        if content is None:
            logger.warning("Image for %s not received", side.name)
            return None

        path = unique_path(folder / image_filename(side, quantity))
        try:
            path.write_bytes(content)
        except OSError as e:
            logger.error("Could not write %s: %s", path, e)
            return None
        return path

    async def download_deck(self, deck: DeckDetails, folder: Path) -> list[Path]:
        """
        Download every printable side of `deck`.

        Returns:
            Paths of the files written
        """
        folder.mkdir(parents=True, exist_ok=True)
        jobs: list[tuple[CardEntry, CardSide]] = [
            (entry, side) for entry in deck.printable_cards() for side in entry.sides
        ]

        self.progress.start(ProgressStage.DOWNLOAD_IMAGES)
        written: list[Path] = []
        for done, (entry, side) in enumerate(jobs, start=1):
            path = await self.download_side(side, entry.quantity, folder)
            if path is None:
                self.progress.error(
                    ProgressStage.DOWNLOAD_IMAGES, f"Image for {side.name} could not be downloaded"
                )
            else:
                written.append(path)
            self.progress.report(ProgressStage.DOWNLOAD_IMAGES, done / len(jobs) * 100)

        if not jobs:
            self.progress.report(ProgressStage.DOWNLOAD_IMAGES, 100.0)

        logger.info("Downloaded %d of %d images to %s", len(written), len(jobs), folder)
        return written
