"""Generators and readers for the binary sample relations used to load a database."""

from __future__ import annotations

import argparse
import random
import struct
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Iterator, Optional, Sequence

_ENCODING = "latin-1"
_RANDOMIZE_PASSES = 10
_INT = struct.Struct("<i")


def _fixed(text: str, size: int) -> bytes:
    raw = text.encode(_ENCODING)
    if len(raw) > size:
        raise ValueError(f"{text!r} does not fit in {size} bytes")
    return raw


def _c_string(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode(_ENCODING)


@dataclass(frozen=True)
class Soap:
    """A row of the soaps relation."""

    soapid: int
    sname: str
    network: str
    rating: float

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<i28s4sf")
    SIZE: ClassVar[int] = _FORMAT.size

    def to_bytes(self) -> bytes:
        return self._FORMAT.pack(
            self.soapid, _fixed(self.sname, 28), _fixed(self.network, 4), self.rating
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Soap":
        soapid, sname, network, rating = cls._FORMAT.unpack(bytes(data))
        return cls(soapid, _c_string(sname), _c_string(network), rating)


@dataclass(frozen=True)
class Star:
    """A row of the stars relation."""

    starid: int
    stname: str
    plays: str
    soapid: int

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<i20s12si")
    SIZE: ClassVar[int] = _FORMAT.size

    def to_bytes(self) -> bytes:
        return self._FORMAT.pack(
            self.starid, _fixed(self.stname, 20), _fixed(self.plays, 12), self.soapid
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Star":
        starid, stname, plays, soapid = cls._FORMAT.unpack(bytes(data))
        return cls(starid, _c_string(stname), _c_string(plays), soapid)


@dataclass(frozen=True)
class Rel:
    """A row of the rel500 / rel1000 benchmark relations."""

    unique1: int
    unique2: int
    hundred1: int
    hundred2: int
    dummy: bytes

    DUMMY_SIZE: ClassVar[int] = 84
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("<iiii84s")
    SIZE: ClassVar[int] = _FORMAT.size

    @property
    def label(self) -> str:
        """The text stored at the start of the dummy field."""
        return _c_string(self.dummy)

    def to_bytes(self) -> bytes:
        return self._FORMAT.pack(
            self.unique1, self.unique2, self.hundred1, self.hundred2, self.dummy
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Rel":
        return cls(*cls._FORMAT.unpack(bytes(data)))


_SOAPS = (
    (0, "Days of Our Lives", "NBC", 7.02),
    (1, "General Hospital", "ABC", 9.81),
    (2, "Guiding Light", "CBS", 4.02),
    (3, "One Life to Live", "ABC", 2.31),
    (4, "Santa Barbara", "NBC", 6.44),
    (5, "The Young and the Restless", "CBS", 5.50),
    (6, "As the World Turns", "CBS", 7.00),
    (7, "Another World", "NBC", 1.97),
    (8, "All My Children", "ABC", 8.82),
)

_STARS = (
    (0, "Hayes, Kathryn", "Kim", 6),
    (1, "DeFreitas, Scott", "Andy", 6),
    (2, "Grahn, Nancy", "Julia", 4),
    (3, "Linder, Kate", "Esther", 5),
    (4, "Cooper, Jeanne", "Katherine", 5),
    (5, "Ehlers, Beth", "Harley", 2),
    (6, "Novak, John", "Keith", 4),
    (7, "Elliot, Patricia", "Renee", 3),
    (8, "Hutchinson, Fiona", "Gabrielle", 5),
    (9, "Carey, Phil", "Asa", 5),
    (10, "Walker, Nicholas", "Max", 3),
    (11, "Ross, Charlotte", "Eve", 0),
    (12, "Anthony, Eugene", "Stan", 8),
    (13, "Douglas, Jerry", "John", 5),
    (14, "Holbrook, Anna", "Sharlene", 7),
    (15, "Hammer, Jay", "Fletcher", 2),
    (16, "Sloan, Tina", "Lillian", 2),
    (17, "DuClos, Danielle", "Lisa", 3),
    (18, "Tuck, Jessica", "Megan", 3),
    (19, "Ashford, Matthew", "Jack", 0),
    (20, "Novak, John", "Keith", 4),
    (21, "Larson, Jill", "Opal", 8),
    (22, "McKinnon, Mary", "Denise", 7),
    (23, "Barr, Julia", "Brooke", 8),
    (24, "Borlenghi, Matt", "Brian", 8),
    (25, "Hughes, Finola", "Anna", 1),
    (26, "Rogers, Tristan", "Robert", 1),
    (27, "Richardson, Cheryl", "Jenny", 1),
    (28, "Evans, Mary Beth", "Kayla", 0),
)


def soap_records() -> list[Soap]:
    """Return the rows of the soaps sample relation."""
    return [Soap(*row) for row in _SOAPS]


def star_records() -> list[Star]:
    """Return the rows of the stars sample relation."""
    return [Star(*row) for row in _STARS]


def _write_records(path: Path, records) -> None:
    with open(path, "wb") as handle:
        for record in records:
            handle.write(record.to_bytes())


def write_soaps_stars(directory) -> tuple[Path, Path]:
    """Write soaps.data and stars.data into the directory; return their paths."""
    directory = Path(directory)
    stars_path = directory / "stars.data"
    soaps_path = directory / "soaps.data"
    _write_records(stars_path, star_records())
    _write_records(soaps_path, soap_records())
    return soaps_path, stars_path


def generate_rels(
    count: int, key_range: int, label: str, rng: random.Random
) -> list[Rel]:
    """Make count random rows with unique keys in 1..key_range, labelled label.N."""
    if count < 0:
        raise ValueError("count must not be negative")
    if key_range < 1:
        raise ValueError("key range must be positive")
    rows = []
    for i in range(count):
        unique1 = rng.randrange(key_range) + 1
        unique2 = rng.randrange(key_range) + 1
        hundred1 = rng.randrange(100) + 1
        hundred2 = rng.randrange(100) + 1
        text = f"{label}.{i:3d}".encode(_ENCODING)[: Rel.DUMMY_SIZE - 1] + b"\0"
        dummy = text.ljust(Rel.DUMMY_SIZE, b" ")
        rows.append(Rel(unique1, unique2, hundred1, hundred2, dummy))
    return rows


def write_rel_files(directory, seed: Optional[int] = None) -> tuple[Path, Path]:
    """Write rel500.data and rel1000.data from one random stream."""
    directory = Path(directory)
    rng = random.Random(seed)
    rel500 = directory / "rel500.data"
    rel1000 = directory / "rel1000.data"
    _write_records(rel500, generate_rels(500, 500, "rel500", rng))
    _write_records(rel1000, generate_rels(1000, 1000, "rel1000", rng))
    return rel500, rel1000


def shuffled_unique(count: int, rng: random.Random) -> list[int]:
    """Return 0..count-1 shuffled by repeated random swaps."""
    if count < 0:
        raise ValueError("count must not be negative")
    nums = list(range(count))
    for _ in range(_RANDOMIZE_PASSES):
        for i in range(count):
            j = rng.randrange(count)
            nums[i], nums[j] = nums[j], nums[i]
    return nums


def write_unique_tuples(path, count: int, seed: Optional[int] = None) -> list[int]:
    """Write count shuffled unique integers as 4-byte tuples; return them."""
    nums = shuffled_unique(count, random.Random(seed))
    with open(path, "wb") as handle:
        for value in nums:
            handle.write(_INT.pack(value))
    return nums


def _iter_rels(path) -> Iterator[Rel]:
    with open(path, "rb") as handle:
        while chunk := handle.read(Rel.SIZE):
            if len(chunk) != Rel.SIZE:
                raise ValueError(f"{path}: truncated record at end of file")
            yield Rel.from_bytes(chunk)


def read_rels(path) -> list[Rel]:
    """Read every row from a rel data file."""
    return list(_iter_rels(path))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minirel-datagen", description="Generate or inspect sample data files."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    soaps = commands.add_parser("soaps", help="write soaps.data and stars.data")
    soaps.add_argument("directory", nargs="?", default=".")

    rels = commands.add_parser("rels", help="write rel500.data and rel1000.data")
    rels.add_argument("directory", nargs="?", default=".")
    rels.add_argument("--seed", type=int, default=None)

    unique = commands.add_parser("unique", help="write shuffled unique integers")
    unique.add_argument("count", type=int)
    unique.add_argument("output")
    unique.add_argument("--seed", type=int, default=None)

    dump = commands.add_parser("dump", help="print the rows of rel data files")
    dump.add_argument("files", nargs="+")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point."""
    args = _build_parser().parse_args(argv)
    try:
        if args.command == "soaps":
            write_soaps_stars(args.directory)
        elif args.command == "rels":
            write_rel_files(args.directory, args.seed)
        elif args.command == "unique":
            write_unique_tuples(args.output, args.count, args.seed)
            print("Done.")
        else:
            for path in args.files:
                for row in _iter_rels(path):
                    print(
                        f"{row.unique1}\t{row.unique2}\t{row.hundred1}\t"
                        f"{row.hundred2}\t{row.label}"
                    )
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0