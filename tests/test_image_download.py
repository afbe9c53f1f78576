"""Tests for card image download."""

from pathlib import Path

import httpx
import pytest
import respx

from proxyprinter.clients.transport import HttpTransport
from proxyprinter.models.card import CardEntry, CardSide
from proxyprinter.models.deck import DeckDetails
from proxyprinter.models.progress import ProgressEvent, ProgressReporter
from proxyprinter.services.image_download import ImageDownloader, image_filename, unique_path


class TestImageFilename:
    def test_quantity_prefix(self) -> None:
        side = CardSide(name="Sol Ring", image_url="https://img/sol.jpg")

        assert image_filename(side, 2) == "2_Sol Ring.jpg"

    def test_split_name(self) -> None:
        side = CardSide(name="Fire // Ice", image_url="https://img/fire.jpg")

        assert image_filename(side, 1) == "1_Fire-Ice.jpg"

    def test_unsafe_characters(self) -> None:
        side = CardSide(name='Who/What/When "Where"?', image_url="https://img/w.jpg")

        assert image_filename(side, 1) == "1_Who_What_When _Where__.jpg"


class TestUniquePath:
    def test_free_path_unchanged(self, tmp_path: Path) -> None:
        assert unique_path(tmp_path / "1_Island.jpg") == tmp_path / "1_Island.jpg"

    def test_existing_file_gets_suffix(self, tmp_path: Path) -> None:
        (tmp_path / "1_Island.jpg").write_bytes(b"x")
        (tmp_path / "1_Island (2).jpg").write_bytes(b"x")

        assert unique_path(tmp_path / "1_Island.jpg") == tmp_path / "1_Island (3).jpg"


class TestImageDownloader:
    @respx.mock
    async def test_downloads_every_side(self, transport: HttpTransport, tmp_path: Path) -> None:
        respx.get("https://img/front.jpg").mock(return_value=httpx.Response(200, content=b"F"))
        respx.get("https://img/back.jpg").mock(return_value=httpx.Response(200, content=b"B"))
        respx.get("https://img/island.jpg").mock(return_value=httpx.Response(200, content=b"I"))
        deck = DeckDetails(
            cards=[
                CardEntry(
                    name="Delver of Secrets",
                    quantity=4,
                    sides=[
                        CardSide(name="Delver of Secrets", image_url="https://img/front.jpg"),
                        CardSide(name="Insectile Aberration", image_url="https://img/back.jpg"),
                    ],
                ),
                CardEntry(
                    name="Island",
                    quantity=10,
                    sides=[CardSide(name="Island", image_url="https://img/island.jpg")],
                ),
                CardEntry(name="Unknown Card"),
            ]
        )
        folder = tmp_path / "images"

        written = await ImageDownloader(transport).download_deck(deck, folder)

        assert sorted(p.name for p in written) == [
            "10_Island.jpg",
            "4_Delver of Secrets.jpg",
            "4_Insectile Aberration.jpg",
        ]
        assert (folder / "4_Delver of Secrets.jpg").read_bytes() == b"F"

    @respx.mock
    async def test_failed_image_reported(self, transport: HttpTransport, tmp_path: Path) -> None:
        respx.get("https://img/sol.jpg").mock(return_value=httpx.Response(404))
        progress = ProgressReporter()
        events: list[ProgressEvent] = []
        progress.subscribe(events.append)
        side = CardSide(name="Sol Ring", image_url="https://img/sol.jpg")
        deck = DeckDetails(cards=[CardEntry(name="Sol Ring", sides=[side])])

        written = await ImageDownloader(transport, progress).download_deck(deck, tmp_path)

        assert written == []
        assert [e.error_message for e in events if e.error_message] == [
            "Image for Sol Ring could not be downloaded"
        ]
        assert events[-1].percent == 100.0

    async def test_empty_deck(self, transport: HttpTransport, tmp_path: Path) -> None:
        progress = ProgressReporter()
        events: list[ProgressEvent] = []
        progress.subscribe(events.append)

        written = await ImageDownloader(transport, progress).download_deck(DeckDetails(), tmp_path)

        assert written == []
        assert [e.percent for e in events] == [0.0, 100.0]

    @respx.mock
    async def test_unwritable_folder_reported(
        self, transport: HttpTransport, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        respx.get("https://img/sol.jpg").mock(return_value=httpx.Response(200, content=b"S"))

        def disk_full(self: Path, data: bytes) -> int:
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(Path, "write_bytes", disk_full)
        progress = ProgressReporter()
        events: list[ProgressEvent] = []
        progress.subscribe(events.append)
        side = CardSide(name="Sol Ring", image_url="https://img/sol.jpg")
        deck = DeckDetails(cards=[CardEntry(name="Sol Ring", sides=[side])])

        written = await ImageDownloader(transport, progress).download_deck(deck, tmp_path)

        assert written == []
        assert [e.error_message for e in events if e.error_message] == [
            "Image for Sol Ring could not be downloaded"
        ]
        assert events[-1].percent == 100.0
