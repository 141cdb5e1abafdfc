"""Turn a flat dungeon layout into a level of concrete, tile-set specific tiles.

The flat layout only knows floor, wall, door and stairs. Here every wall
cell gets an orientation (x wall, y wall, corners, ends), outside and inside
walls are told apart, walls that meet are joined, and finally each abstract
tile kind is mapped to the tile number of a :class:`~fadungeon.tileset.TileSet`.
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence

from . import rng
from .grid import Grid
from .layout import Basic, generate_flat
from .tileset import TileKind, TileSet, load_tileset

_NO_TILE = -1

_CONNECTS_Y = frozenset(
    {
        TileKind.INSIDE_Y_WALL,
        TileKind.Y_DOOR,
        TileKind.INSIDE_X_WALL_END,
        TileKind.INSIDE_X_WALL_END_BACK,
        TileKind.INSIDE_LEFT_CORNER,
        TileKind.INSIDE_RIGHT_CORNER,
        TileKind.INSIDE_TOP_CORNER,
        TileKind.INSIDE_BOTTOM_CORNER,
    }
)

_CONNECTS_X = frozenset(
    {
        TileKind.INSIDE_X_WALL,
        TileKind.X_DOOR,
        TileKind.INSIDE_Y_WALL_END,
        TileKind.INSIDE_Y_WALL_END_BACK,
        TileKind.INSIDE_LEFT_CORNER,
        TileKind.INSIDE_RIGHT_CORNER,
        TileKind.INSIDE_TOP_CORNER,
        TileKind.INSIDE_BOTTOM_CORNER,
    }
)

_UP_STAIRS_BLOCK = (
    TileKind.UP_STAIRS_1,
    TileKind.UP_STAIRS_2,
    TileKind.UP_STAIRS_3,
    TileKind.UP_STAIRS_4,
    TileKind.UP_STAIRS_5,
    TileKind.UP_STAIRS_6,
    TileKind.UP_STAIRS_7,
    TileKind.UP_STAIRS_8,
    TileKind.UP_STAIRS_9,
)

_DOWN_STAIRS_BLOCK = (
    TileKind.DOWN_STAIRS_1,
    TileKind.DOWN_STAIRS_2,
    TileKind.DOWN_STAIRS_3,
    TileKind.DOWN_STAIRS_4,
    TileKind.DOWN_STAIRS_5,
    TileKind.DOWN_STAIRS_6,
    TileKind.DOWN_STAIRS_7,
    TileKind.DOWN_STAIRS_8,
    TileKind.DOWN_STAIRS_9,
)


@dataclass
class GeneratedLevel:
    """A finished level: tile numbers plus stairs positions and asset paths.

    Stairs positions are in doubled coordinates, as used by the level's
    sub-tile grid.
    """

    tiles: Grid
    dlvl: int
    level_num: int
    up_stairs: tuple[int, int]
    down_stairs: tuple[int, int]
    door_map: dict[int, int] = field(default_factory=dict)

    def _asset(self, extension: str) -> str:
        n = self.level_num
        return f"levels/l{n}data/l{n}.{extension}"

    @property
    def cel_path(self) -> str:
        return self._asset("cel")

    @property
    def til_path(self) -> str:
        return self._asset("til")

    @property
    def min_path(self) -> str:
        return self._asset("min")

    @property
    def sol_path(self) -> str:
        return self._asset("sol")


def _level_num(dlvl: int) -> int:
    if dlvl < 1:
        raise ValueError(f"dungeon level must be at least 1, got {dlvl}")
    return (dlvl - 1) // 4 + 1


def tileset_path(dlvl: int) -> str:
    """The conventional tile set file for dungeon level ``dlvl``."""
    return f"resources/tilesets/l{_level_num(dlvl)}.ini"


def _is_wall(x: int, y: int, flat: Grid, inside: bool) -> bool:
    value = flat.get(x, y)
    if inside:
        return value in (Basic.INSIDE_WALL, Basic.DOOR)
    return value in (Basic.WALL, Basic.UP_STAIRS)


def _set_point(
    x: int, y: int, val: int, flat: Grid, level: Grid, offset: int, inside: bool
) -> None:
    def at(px: int, py: int) -> int:
        return flat.get(px, py)

    def wall(px: int, py: int) -> bool:
        return _is_wall(px, py, flat, inside)

    new = val

    if val == TileKind.X_WALL + offset:
        if at(x, y) == Basic.DOOR and inside:
            new = TileKind.X_DOOR
        elif at(x, y) == Basic.UP_STAIRS:
            new = TileKind.UP_STAIRS
        elif at(x - 1, y) == Basic.BLANK and at(x, y + 1) == Basic.BLANK:
            new = TileKind.OUTSIDE_LEFT_CORNER
        elif not inside and at(x, y + 1) == Basic.BLANK:
            new = TileKind.OUTSIDE_X_WALL
        elif at(x + 1, y) == Basic.FLOOR:
            new = TileKind.INSIDE_X_WALL_END
        elif wall(x + 1, y) and wall(x, y - 1):
            new = TileKind.LEFT_CORNER + offset
        elif at(x - 1, y) == Basic.FLOOR:
            new = TileKind.INSIDE_X_WALL_END_BACK

    elif val == TileKind.Y_WALL + offset:
        if at(x, y) == Basic.DOOR and inside:
            new = TileKind.Y_DOOR
        elif not inside and at(x + 1, y) == Basic.BLANK:
            new = TileKind.OUTSIDE_Y_WALL
        elif at(x, y + 1) == Basic.FLOOR:
            new = TileKind.INSIDE_Y_WALL_END
        elif at(x, y - 1) == Basic.FLOOR:
            new = TileKind.INSIDE_Y_WALL_END_BACK

    elif val == TileKind.BOTTOM_CORNER + offset:
        if not inside and Basic.BLANK in (at(x + 1, y + 1), at(x + 1, y), at(x, y + 1)):
            if wall(x, y + 1):
                new = TileKind.OUTSIDE_Y_WALL
            else:
                new = TileKind.OUTSIDE_BOTTOM_CORNER
        elif wall(x, y + 1):
            new = TileKind.Y_WALL + offset

    elif not inside and val == TileKind.TOP_CORNER:
        if at(x + 1, y + 1) == Basic.BLANK:
            new = TileKind.OUTSIDE_TOP_CORNER

    elif not inside and val == TileKind.RIGHT_CORNER:
        if Basic.BLANK in (at(x + 1, y - 1), at(x + 1, y), at(x, y - 1)):
            new = TileKind.OUTSIDE_RIGHT_CORNER

    elif not inside and val == TileKind.LEFT_CORNER:
        if Basic.BLANK in (at(x - 1, y + 1), at(x - 1, y), at(x, y + 1)):
            new = TileKind.OUTSIDE_LEFT_CORNER

    level[x, y] = int(new)


def fill_isometric(
    flat: Grid, level: Grid, ignore_not_wall: bool, wall_offset: int, inside_wall: bool
) -> None:
    """Write oriented tile kinds for the walls of ``flat`` into ``level``.

    With ``inside_wall`` the inside walls and doors are handled, otherwise
    the outside walls. Unless ``ignore_not_wall`` is set, non-wall cells are
    written too.
    """
    for x, y, value in flat.cells():
        if value == Basic.UP_STAIRS:
            level[x, y] = TileKind.UP_STAIRS
            continue
        if value == Basic.DOWN_STAIRS:
            level[x, y] = TileKind.DOWN_STAIRS
            continue

        def wall(px: int, py: int) -> bool:
            return _is_wall(px, py, flat, inside_wall)

        if wall(x, y):
            if wall(x + 1, y):
                kind = TileKind.TOP_CORNER if wall(x, y + 1) else TileKind.X_WALL
            elif wall(x - 1, y):
                if wall(x, y - 1):
                    kind = TileKind.BOTTOM_CORNER
                elif wall(x, y + 1):
                    kind = TileKind.RIGHT_CORNER
                else:
                    kind = TileKind.X_WALL
            else:
                kind = TileKind.Y_WALL
            _set_point(x, y, kind + wall_offset, flat, level, wall_offset, inside_wall)
        elif not ignore_not_wall:
            if value == Basic.BLANK:
                level[x, y] = TileKind.BLANK
            elif value == Basic.INSIDE_WALL:
                level[x, y] = TileKind.INSIDE_X_WALL
            else:
                level[x, y] = TileKind.FLOOR


def _joins_y(x: int, y: int, level: Grid) -> bool:
    return level.get(x, y, _NO_TILE) in _CONNECTS_Y


def _joins_x(x: int, y: int, level: Grid) -> bool:
    return level.get(x, y, _NO_TILE) in _CONNECTS_X


def _corner_join(
    both: bool, first: bool, second: bool, joined: int, first_kind: int, second_kind: int
) -> Optional[int]:
    if both:
        return joined
    if first:
        return first_kind
    if second:
        return second_kind
    return None


def connect_walls(level: Grid) -> None:
    """Replace outside wall tiles that meet an inside wall with join tiles."""
    for x in range(level.width):
        for y in range(level.height):
            value = level[x, y]
            new: Optional[int] = None

            if value == TileKind.Y_WALL:
                if _joins_x(x + 1, y, level):
                    new = TileKind.JOIN_Y
            elif value == TileKind.RIGHT_CORNER:
                a, b = _joins_x(x + 1, y, level), _joins_y(x, y - 1, level)
                new = _corner_join(
                    a and b, a, b,
                    TileKind.JOIN_RIGHT_CORNER,
                    TileKind.JOIN_Y_RIGHT_CORNER,
                    TileKind.JOIN_OUT_X_RIGHT_CORNER,
                )
            elif value == TileKind.OUTSIDE_X_WALL:
                if _joins_y(x, y - 1, level):
                    new = TileKind.JOIN_OUT_X
            elif value == TileKind.OUTSIDE_TOP_CORNER:
                a, b = _joins_x(x - 1, y, level), _joins_y(x, y - 1, level)
                new = _corner_join(
                    a and b, a, b,
                    TileKind.JOIN_TOP_CORNER,
                    TileKind.JOIN_OUT_Y_TOP_CORNER,
                    TileKind.JOIN_OUT_X_TOP_CORNER,
                )
            elif value == TileKind.OUTSIDE_Y_WALL:
                if _joins_x(x - 1, y, level):
                    new = TileKind.JOIN_OUT_Y
            elif value == TileKind.LEFT_CORNER:
                a, b = _joins_x(x - 1, y, level), _joins_y(x, y + 1, level)
                new = _corner_join(
                    a and b, a, b,
                    TileKind.JOIN_LEFT_CORNER,
                    TileKind.JOIN_OUT_Y_LEFT_CORNER,
                    TileKind.JOIN_X_LEFT_CORNER,
                )
            elif value == TileKind.X_WALL:
                if _joins_y(x, y + 1, level):
                    new = TileKind.JOIN_X
            elif value == TileKind.BOTTOM_CORNER:
                a, b = _joins_x(x + 1, y, level), _joins_y(x, y + 1, level)
                new = _corner_join(
                    a and b, a, b,
                    TileKind.JOIN_BOTTOM_CORNER,
                    TileKind.JOIN_Y_BOTTOM_CORNER,
                    TileKind.JOIN_X_BOTTOM_CORNER,
                )

            if new is not None:
                level[x, y] = int(new)


def _place_block(
    level: Grid, centre: tuple[int, int], block: Sequence[TileKind], tileset: TileSet
) -> None:
    cx, cy = centre
    kinds = iter(block)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            level[cx + dx, cy + dy] = tileset.convert(next(kinds))


def generate(width: int, height: int, dlvl: int, tileset: TileSet) -> GeneratedLevel:
    """Generate dungeon level ``dlvl`` of the given size using ``tileset``."""
    level_num = _level_num(dlvl)
    flat = generate_flat(width, height, level_num)

    level = Grid(width, height)
    fill_isometric(flat, level, False, 0, False)
    fill_isometric(flat, level, True, TileKind.INSIDE_X_WALL, True)
    connect_walls(level)

    up_stairs = (0, 0)
    down_stairs = (0, 0)
    for x, y, value in level.cells():
        if value == TileKind.UP_STAIRS:
            up_stairs = (x * 2, y * 2)
            level[x, y] = TileKind.FLOOR
        elif value == TileKind.DOWN_STAIRS:
            down_stairs = (x * 2, y * 2)
            level[x, y] = TileKind.FLOOR
        else:
            level[x, y] = tileset.convert(value)

    # Random aesthetic variation.
    for x, y, value in level.cells():
        level[x, y] = tileset.random_tile(value)

    _place_block(level, (up_stairs[0] // 2, up_stairs[1] // 2), _UP_STAIRS_BLOCK, tileset)
    _place_block(
        level, (down_stairs[0] // 2, down_stairs[1] // 2), _DOWN_STAIRS_BLOCK, tileset
    )

    return GeneratedLevel(
        tiles=level,
        dlvl=dlvl,
        level_num=level_num,
        up_stairs=up_stairs,
        down_stairs=down_stairs,
        door_map=dict(tileset.door_map),
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Generate a level and print its tile numbers, one row per line."""
    parser = argparse.ArgumentParser(
        prog="fadungeon", description="Generate a random dungeon level."
    )
    parser.add_argument("--width", type=int, default=85)
    parser.add_argument("--height", type=int, default=75)
    parser.add_argument("--dlvl", type=int, default=1, help="dungeon level, 1 or more")
    parser.add_argument("--tileset", help="tile set INI file")
    parser.add_argument("--seed", type=int, help="random seed")
    args = parser.parse_args(argv)

    if args.dlvl < 1:
        parser.error("--dlvl must be at least 1")

    rng.seed(args.seed if args.seed is not None else int(time.time()))
    path = args.tileset or tileset_path(args.dlvl)
    try:
        tileset = load_tileset(path)
    except (OSError, ValueError) as error:
        print(f"cannot load tile set {path}: {error}", file=sys.stderr)
        return 1

    result = generate(args.width, args.height, args.dlvl, tileset)
    tiles = result.tiles
    for y in range(tiles.height):
        print(" ".join(str(tiles[x, y]) for x in range(tiles.width)))
    return 0