"""
Parser for locally supplied card lists.

Accepts the common export format used by Arena, Moxfield and Archidekt:
    <quantity> <card name> (<set_code>) <collector_number> [*F*|*E*|*A*]

Example:
    1 Atraxa, Praetors' Voice (2X2) 190 *F*
    4 Lightning Bolt (LEB) 163
    1 Delver of Secrets // Insectile Aberration
    12 Island

Section headers (Deck, Sideboard, Commander, Companion, Maybeboard) and
`//` comment lines are skipped. Rows with quantity 0 are dropped.
"""

import re

from proxyprinter.models.card import CardEntry
from proxyprinter.models.deck import DeckDetails

# Trailing finish markers: *F* foil, *E* etched, *A* art series
MODIFIER_PATTERN = re.compile(r"\s+\*([FEA])\*$", re.IGNORECASE)

# Pattern: "4 Lightning Bolt (LEB) 163" or "4 Card (SET) 290a"
# Groups: (quantity, card_name, set_code, collector_number)
FULL_PATTERN = re.compile(r"^(\d+)x?\s+(.+?)\s+\(([A-Za-z0-9]+)\)\s+(\S+)$")

# Pattern: "4 Lightning Bolt (LEB)" (set without collector number)
SET_ONLY_PATTERN = re.compile(r"^(\d+)x?\s+(.+?)\s+\(([A-Za-z0-9]+)\)$")

# Pattern: "4 Lightning Bolt"
SIMPLE_PATTERN = re.compile(r"^(\d+)x?\s+(.+)$")

SECTION_HEADERS = frozenset({"deck", "sideboard", "commander", "companion", "maybeboard"})


def parse_card_line(line: str) -> CardEntry | None:
    """
    Parse one card line.

    Returns:
        CardEntry, or None for blank lines, headers, comments, malformed
        lines and zero-quantity rows
    """
    line = line.strip()
    if not line or line.startswith("//") or line.startswith("#"):
        return None
    if line.rstrip(":").lower() in SECTION_HEADERS:
        return None

    modifiers: set[str] = set()
    while match := MODIFIER_PATTERN.search(line):
        modifiers.add(match.group(1).upper())
        line = line[: match.start()]

    expansion_code: str | None = None
    collector_number: str | None = None

    if match := FULL_PATTERN.match(line):
        quantity, name, expansion_code, collector_number = match.groups()
    elif match := SET_ONLY_PATTERN.match(line):
        quantity, name, expansion_code = match.groups()
    elif match := SIMPLE_PATTERN.match(line):
        quantity, name = match.groups()
    else:
        return None

    name = name.strip()
    if int(quantity) == 0 or not name:
        return None

    return CardEntry(
        name=name,
        quantity=int(quantity),
        expansion_code=expansion_code.lower() if expansion_code else None,
        collector_number=collector_number,
        foil="F" in modifiers,
        etched="E" in modifiers,
        art="A" in modifiers,
    )


def parse_card_list(text: str, name: str = "") -> DeckDetails:
    """
    Parse a whole card list into a deck.

    Args:
        text: Raw card list text
        name: Deck name to use (local lists carry none)

    Returns:
        DeckDetails with one entry per valid line, in file order
    """
    deck = DeckDetails(name=name)
    if not text or not text.strip():
        return deck

    for line in text.splitlines():
        entry = parse_card_line(line)
        if entry is not None:
            deck.cards.append(entry)

    return deck
