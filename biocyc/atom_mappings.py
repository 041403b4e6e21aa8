"""Decoder for BioCyc reaction atom-mapping files.

A file holds one block per mapping::

    REACTION - FUMHYDR-RXN
    NTH-ATOM-MAPPING - 1
    MAPPING-TYPE - NO-HYDROGEN-ENCODING
    FROM-SIDE - ((FUM 0 7) (WATER 8 8))
    TO-SIDE - ((MAL 0 8))
    INDICES - 0 1 2 3 4 5 6 7 8

Each ``(id start end)`` triple names ``end - start + 1`` atoms of one
compound; the k-th occurrence of a compound on a side is labelled ``k``.
``INDICES`` pairs the N-th from-side atom with the to-side atom at the given
position.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

FIELDS = ("REACTION", "NTH-ATOM-MAPPING", "MAPPING-TYPE", "FROM-SIDE", "TO-SIDE", "INDICES")

BLOCK = re.compile("".join(re.escape(f"{name} - ") + r"([^\n]+)(?:\n|\Z)" for name in FIELDS))
TRIPLE = re.compile(r"\(\s*(\([^()]*\)|[^\s()]+)\s+(0|[1-9][0-9]*)\s+(0|[1-9][0-9]*)\s*\)")
ID_WITH_INDEX = re.compile(r"\(\s*([^\s()]+)\s+(0|[1-9][0-9]*)\s*\)")
INDEX = re.compile(r"0|[1-9][0-9]*")


@dataclass
class AtomMapping:
    """One decoded mapping block."""

    reaction: str
    nth_atom_mapping: int
    mapping_type: str
    mapping: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SideEntry:
    compound: str
    occurrence: int
    start: int
    end: int

    def labels(self) -> list[str]:
        return [
            f"{self.occurrence}-{self.compound}-atom{n}"
            for n in range(1, self.end - self.start + 2)
        ]


def parse_side(text: str) -> list[SideEntry]:
    """Parse ``((id start end) ...)`` into entries with occurrence counters."""
    counts: dict[str, int] = {}
    entries: list[SideEntry] = []
    for match in TRIPLE.finditer(text):
        compound, start, end = match.groups()
        indexed = ID_WITH_INDEX.fullmatch(compound)
        if indexed is not None:
            compound = indexed.group(1)
        counts[compound] = counts.get(compound, 0) + 1
        entries.append(SideEntry(compound, counts[compound], int(start), int(end)))
    return entries


def side_labels(text: str) -> list[str]:
    return [label for entry in parse_side(text) for label in entry.labels()]


def parse_indices(text: str) -> list[int]:
    return [int(index) for index in INDEX.findall(text)]


def _decode(groups: tuple[str, ...]) -> AtomMapping:
    reaction, nth, mapping_type, from_side, to_side, indices = (g.strip() for g in groups)
    from_labels = side_labels(from_side)
    to_labels = side_labels(to_side)

    positions = parse_indices(indices)
    if len(positions) > len(from_labels):
        raise ValueError(
            f"{reaction}: {len(positions)} indices for {len(from_labels)} from-side atoms"
        )
    mapping: dict[str, str] = {}
    for n, position in enumerate(positions):
        if position >= len(to_labels):
            raise ValueError(
                f"{reaction}: index {position} out of range for {len(to_labels)} to-side atoms"
            )
        mapping[from_labels[n]] = to_labels[position]

    return AtomMapping(reaction, int(nth), mapping_type, mapping)


def parse_blocks(text: str) -> list[AtomMapping]:
    """Decode every mapping block in *text*, in order."""
    return [_decode(match.groups()) for match in BLOCK.finditer(str(text))]


def parse_block(text: str) -> AtomMapping:
    """Decode the first mapping block in *text*."""
    match = BLOCK.search(str(text))
    if match is None:
        raise ValueError("No atom mapping block found")
    return _decode(match.groups())


def parse(text: str) -> list[dict[str, str]]:
    """Decode *text* into one ``{from-atom: to-atom}`` dict per block."""
    return [block.mapping for block in parse_blocks(text)]
