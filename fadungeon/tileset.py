"""Tile sets: map abstract dungeon tile kinds to concrete tile numbers.

A tile set is described by an INI file. The ``[Basic]`` section gives the
tile number for every kind, an optional section per kind lists weighted
alternative tiles for visual variety, and ``[DoorMap]`` pairs closed and
open door tiles.
"""

from __future__ import annotations

import configparser
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Union

from . import rng


class TileKind(IntEnum):
    """Abstract tile kinds used while building a level.

    The first two blocks are parallel: an inside wall kind equals the plain
    kind plus ``INSIDE_X_WALL``.
    """

    X_WALL = 0
    Y_WALL = 1
    LEFT_CORNER = 2
    RIGHT_CORNER = 3
    BOTTOM_CORNER = 4
    TOP_CORNER = 5

    INSIDE_X_WALL = 6
    INSIDE_Y_WALL = 7
    INSIDE_LEFT_CORNER = 8
    INSIDE_RIGHT_CORNER = 9
    INSIDE_BOTTOM_CORNER = 10
    INSIDE_TOP_CORNER = 11

    INSIDE_X_WALL_END = 12
    INSIDE_X_WALL_END_BACK = 13
    INSIDE_Y_WALL_END = 14
    INSIDE_Y_WALL_END_BACK = 15

    OUTSIDE_X_WALL = 16
    OUTSIDE_Y_WALL = 17
    OUTSIDE_BOTTOM_CORNER = 18
    OUTSIDE_RIGHT_CORNER = 19
    OUTSIDE_LEFT_CORNER = 20
    OUTSIDE_TOP_CORNER = 21
    FLOOR = 22
    BLANK = 23
    X_DOOR = 24
    Y_DOOR = 25

    JOIN_Y = 26
    JOIN_Y_RIGHT_CORNER = 27
    JOIN_RIGHT_CORNER = 28
    JOIN_OUT_X_RIGHT_CORNER = 29
    JOIN_OUT_X = 30
    JOIN_OUT_X_TOP_CORNER = 31
    JOIN_TOP_CORNER = 32
    JOIN_OUT_Y_TOP_CORNER = 33
    JOIN_OUT_Y = 34
    JOIN_OUT_Y_LEFT_CORNER = 35
    JOIN_LEFT_CORNER = 36
    JOIN_X_LEFT_CORNER = 37
    JOIN_X = 38
    JOIN_X_BOTTOM_CORNER = 39
    JOIN_BOTTOM_CORNER = 40
    JOIN_Y_BOTTOM_CORNER = 41

    UP_STAIRS_1 = 42
    UP_STAIRS_2 = 43
    UP_STAIRS_3 = 44
    UP_STAIRS_4 = 45
    UP_STAIRS_5 = 46
    UP_STAIRS_6 = 47
    UP_STAIRS_7 = 48
    UP_STAIRS_8 = 49
    UP_STAIRS_9 = 50

    DOWN_STAIRS_1 = 51
    DOWN_STAIRS_2 = 52
    DOWN_STAIRS_3 = 53
    DOWN_STAIRS_4 = 54
    DOWN_STAIRS_5 = 55
    DOWN_STAIRS_6 = 56
    DOWN_STAIRS_7 = 57
    DOWN_STAIRS_8 = 58
    DOWN_STAIRS_9 = 59

    # Markers used only during generation; a tile set has no number for them.
    UP_STAIRS = 60
    DOWN_STAIRS = 61

    @property
    def key(self) -> str:
        """The name of this kind in the ``[Basic]`` section, e.g. ``outsideXWall``."""
        first, *rest = self.name.split("_")
        return first.lower() + "".join(part.capitalize() for part in rest)


_UNLOADED = frozenset({TileKind.UP_STAIRS, TileKind.DOWN_STAIRS})

# Kinds that may have alternatives, in the order they are loaded; when two
# kinds share a tile number the later one's alternatives win.
_ALTERNATIVE_ORDER: tuple[TileKind, ...] = (
    TileKind.X_WALL,
    TileKind.OUTSIDE_X_WALL,
    TileKind.Y_WALL,
    TileKind.OUTSIDE_Y_WALL,
    TileKind.BOTTOM_CORNER,
    TileKind.OUTSIDE_BOTTOM_CORNER,
    TileKind.RIGHT_CORNER,
    TileKind.OUTSIDE_RIGHT_CORNER,
    TileKind.LEFT_CORNER,
    TileKind.OUTSIDE_LEFT_CORNER,
    TileKind.TOP_CORNER,
    TileKind.OUTSIDE_TOP_CORNER,
    TileKind.FLOOR,
    TileKind.BLANK,
    TileKind.X_DOOR,
    TileKind.Y_DOOR,
    TileKind.INSIDE_X_WALL,
    TileKind.INSIDE_X_WALL_END,
    TileKind.INSIDE_X_WALL_END_BACK,
    TileKind.INSIDE_Y_WALL,
    TileKind.INSIDE_Y_WALL_END,
    TileKind.INSIDE_Y_WALL_END_BACK,
    TileKind.INSIDE_LEFT_CORNER,
    TileKind.INSIDE_RIGHT_CORNER,
    TileKind.INSIDE_BOTTOM_CORNER,
    TileKind.INSIDE_TOP_CORNER,
    TileKind.JOIN_Y,
    TileKind.JOIN_Y_RIGHT_CORNER,
    TileKind.JOIN_RIGHT_CORNER,
    TileKind.JOIN_OUT_X_RIGHT_CORNER,
    TileKind.JOIN_OUT_X,
    TileKind.JOIN_OUT_X_TOP_CORNER,
    TileKind.JOIN_TOP_CORNER,
    TileKind.JOIN_OUT_Y_TOP_CORNER,
    TileKind.JOIN_OUT_Y,
    TileKind.JOIN_OUT_Y_LEFT_CORNER,
    TileKind.JOIN_LEFT_CORNER,
    TileKind.JOIN_X_LEFT_CORNER,
    TileKind.JOIN_X,
    TileKind.JOIN_X_BOTTOM_CORNER,
    TileKind.JOIN_BOTTOM_CORNER,
    TileKind.JOIN_Y_BOTTOM_CORNER,
)


def _section_name(kind: TileKind) -> str:
    # The outside x wall section has always been spelled in lower camel case.
    if kind is TileKind.OUTSIDE_X_WALL:
        return kind.key
    return kind.key[0].upper() + kind.key[1:]


Alternatives = tuple[tuple[tuple[int, int], ...], int]


@dataclass
class TileSet:
    """Concrete tile numbers for each kind, with alternatives and door pairs."""

    tiles: dict[TileKind, int]
    alternatives: dict[int, Alternatives] = field(default_factory=dict)
    door_map: dict[int, int] = field(default_factory=dict)

    def convert(self, kind: Union[TileKind, int]) -> int:
        """Return the tile number for ``kind``.

        Raises ValueError for the stair markers, which have no tile number.
        """
        kind = TileKind(kind)
        try:
            return self.tiles[kind]
        except KeyError:
            raise ValueError(f"tried to convert invalid tile {kind.name}") from None

    def random_tile(self, tile: int) -> int:
        """Return ``tile`` or, by the configured odds, one of its alternatives."""
        entry = self.alternatives.get(tile)
        if entry is None:
            return tile
        choices, normal_percent = entry

        if rng.random_in_range(0, 100) <= normal_percent:
            return tile

        if not choices:
            raise ValueError(f"tile {tile} has no alternatives to choose from")

        remaining = rng.random_in_range(0, sum(weight for _, weight in choices))
        for alternative, weight in choices:
            if remaining <= weight:
                return alternative
            remaining -= weight
        return choices[-1][0]


def _parse_int(text: str, where: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise ValueError(f"{where}: expected an integer, got {text!r}") from None


def parse_tileset(text: str) -> TileSet:
    """Build a TileSet from the text of a tile set INI file."""
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    parser.read_string(text)

    if not parser.has_section("Basic"):
        raise ValueError("tile set has no [Basic] section")
    basic = parser["Basic"]

    tiles: dict[TileKind, int] = {}
    for kind in TileKind:
        if kind in _UNLOADED:
            continue
        if kind.key not in basic:
            raise ValueError(f"tile set is missing Basic.{kind.key}")
        tiles[kind] = _parse_int(basic[kind.key], f"Basic.{kind.key}")

    alternatives: dict[int, Alternatives] = {}
    for kind in _ALTERNATIVE_ORDER:
        section = _section_name(kind)
        choices: list[tuple[int, int]] = []
        normal_percent = 100
        if parser.has_section(section):
            properties = parser[section]
            for name, value in properties.items():
                if name == "normal":
                    continue
                choices.append(
                    (
                        _parse_int(name, f"{section} key"),
                        _parse_int(value, f"{section}.{name}"),
                    )
                )
            if "normal" not in properties:
                raise ValueError(f"tile set is missing {section}.normal")
            normal_percent = _parse_int(properties["normal"], f"{section}.normal")
        alternatives[tiles[kind]] = (tuple(choices), normal_percent)

    door_map: dict[int, int] = {}
    if parser.has_section("DoorMap"):
        for name, value in parser["DoorMap"].items():
            closed = _parse_int(name, "DoorMap key")
            opened = _parse_int(value, f"DoorMap.{name}")
            door_map[closed] = opened
            door_map[opened] = closed

    return TileSet(tiles=tiles, alternatives=alternatives, door_map=door_map)


def load_tileset(path: Union[str, Path]) -> TileSet:
    """Read and parse the tile set INI file at ``path``."""
    return parse_tileset(Path(path).read_text(encoding="utf-8"))