"""Flat dungeon layout generation: rooms, corridors, walls, doors and stairs.

The layout is built on a :class:`~fadungeon.grid.Grid` of :class:`Basic`
values. It carries no information about wall orientation; that is added
later when the layout is turned into isometric tiles.

The approach:

1. Scatter many rooms in a radius around the centre of the map, weighted
   towards small sizes.
2. Push them apart with separation steering until they no longer overlap.
3. Split them into real rooms (large) and corridor rooms (small).
4. Join the real rooms along a minimum spanning tree, plus a few extra
   random links for loops, using L-shaped corridors that also open up any
   corridor rooms they cross.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

from . import rng
from .grid import Grid
from .mst import minimum_spanning_tree

ROOM_AREA = 30
"""Rooms with a smaller area become corridor rooms."""

_MAX_ROOM_DIMENSION = 10
_SEPARATION_ITERATIONS = 400

# Compass steps indexed by octant, counter-clockwise from +x.
_STEPS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
    (0, -1),
    (1, -1),
)


class Basic(IntEnum):
    """Cell values of a flat layout. Only their distinctness matters."""

    INSIDE_WALL = 27
    WALL = 56
    UP_STAIRS = 35
    DOWN_STAIRS = 34
    DOOR = 67
    FLOOR = 116
    BLANK = 115


@dataclass
class Room:
    """An axis-aligned rectangle whose outermost cells are its walls."""

    x: int
    y: int
    width: int
    height: int

    def intersects(self, other: Room) -> bool:
        """True if the rooms overlap by more than a shared wall."""
        return not (
            self.y + self.height <= other.y + 1
            or self.y >= other.y + other.height - 1
            or self.x + self.width <= other.x + 1
            or self.x >= other.x + other.width - 1
        )

    def on_border(self, x: int, y: int) -> bool:
        """True if (x, y) is one of the room's wall cells."""
        in_columns = self.x <= x < self.x + self.width
        in_rows = self.y <= y < self.y + self.height
        on_row_wall = in_columns and y in (self.y, self.y + self.height - 1)
        on_column_wall = in_rows and x in (self.x, self.x + self.width - 1)
        return on_row_wall or on_column_wall

    def centre(self) -> tuple[int, int]:
        """The centre cell, rounding towards the top left."""
        return self.x + self.width // 2, self.y + self.height // 2

    def area(self) -> int:
        """Width times height."""
        return self.width * self.height

    def distance(self, other: Room) -> int:
        """Distance between the two centres, truncated to an integer."""
        ax, ay = self.centre()
        bx, by = other.centre()
        return int(math.sqrt((ax - bx) ** 2 + (ay - by) ** 2))


def _fill_room(room: Room, level: Grid) -> None:
    for x in range(room.x, room.x + room.width):
        for y in range(room.y, room.y + room.height):
            level[x, y] = Basic.FLOOR


def _draw_corridor_segment(
    segment: Room, corridor_rooms: Sequence[Room], level: Grid
) -> None:
    _fill_room(segment, level)
    for room in corridor_rooms:
        if segment.intersects(room):
            _fill_room(room, level)


def connect(a: Room, b: Room, corridor_rooms: Sequence[Room], level: Grid) -> None:
    """Join two rooms' centres with an L-shaped corridor three cells wide.

    Any corridor room the corridor crosses is opened up as well.
    """
    ax, ay = a.centre()
    bx, by = b.centre()

    if bx > ax:
        _draw_corridor_segment(Room(ax, ay - 1, bx - ax, 3), corridor_rooms, level)
    elif bx < ax:
        _draw_corridor_segment(Room(bx, ay - 1, ax - bx, 3), corridor_rooms, level)

    if by > ay:
        _draw_corridor_segment(Room(bx - 1, ay, 3, by - ay), corridor_rooms, level)
    elif by < ay:
        _draw_corridor_segment(Room(bx - 1, by, 3, ay - by + 2), corridor_rooms, level)


def _direction_step(vx: float, vy: float) -> tuple[int, int]:
    if vx == 0 and vy == 0:
        return 0, 0
    octant = round(math.atan2(vy, vx) / (math.pi / 4)) % 8
    return _STEPS[octant]


def _move_room(room: Room, vx: float, vy: float, width: int, height: int) -> None:
    # Step one cell towards the vector's compass direction, staying inside the map.
    dx, dy = _direction_step(vx, vy)
    new_x = room.x + dx
    new_y = room.y + dy
    if (
        new_x >= 1
        and new_y >= 1
        and new_x + room.width < width - 1
        and new_y + room.height < height - 1
    ):
        room.x = new_x
        room.y = new_y


def remove_overlaps(rooms: list[Room]) -> None:
    """Repeatedly drop the room overlapping the most others until none overlap."""
    while True:
        worst_index = None
        worst_count = 0
        for index, room in enumerate(rooms):
            count = sum(
                1
                for other_index, other in enumerate(rooms)
                if other_index != index and room.intersects(other)
            )
            if count > worst_count:
                worst_index = index
                worst_count = count
        if worst_index is None:
            return
        del rooms[worst_index]


def separate(rooms: list[Room], width: int, height: int) -> None:
    """Steer overlapping rooms apart inside a width by height map.

    Rooms are moved in place. Any overlaps left after the iteration limit
    are removed by dropping rooms.
    """
    overlap = True
    iterations = 0

    while iterations < _SEPARATION_ITERATIONS and overlap:
        iterations += 1
        overlap = False

        for room in rooms:
            vx = vy = 0.0
            cx, cy = room.centre()

            for other in rooms:
                if other is room or not room.intersects(other):
                    continue
                overlap = True

                ox, oy = other.centre()
                if (ox, oy) == (cx, cy):
                    vx = float(rng.random_in_range(0, 10))
                    vy = float(rng.random_in_range(0, 10))
                    continue

                dx, dy = ox - cx, oy - cy
                magnitude = math.hypot(dx, dy)
                weight = room.distance(other)
                vx += dx / magnitude * weight
                vy += dy / magnitude * weight

            if vx == 0 and vy == 0:
                continue

            # Move away from the neighbours.
            _move_room(room, -vx, -vy, width, height)

    if overlap:
        remove_overlaps(rooms)


def generate_rooms(width: int, height: int) -> list[Room]:
    """Scatter rooms around the map centre and separate them."""
    centre_x = width // 2
    centre_y = height // 2

    # 150 rooms in a radius of 15 suits an 85 by 75 map; scale from that.
    smallest = min(width, height)
    room_count = int(smallest * (150.0 / 75.0))
    radius = int(smallest * (15.0 / 75.0))

    rooms: list[Room] = []
    while len(rooms) < room_count:
        room = Room(
            rng.random_in_range(0, width - 4),
            rng.random_in_range(0, height - 4),
            0,
            0,
        )
        rx, ry = room.centre()
        if (centre_x - rx) ** 2 + (centre_y - ry) ** 2 > radius * radius:
            continue

        room.width = rng.norm_rand(4, min(width - room.x, _MAX_ROOM_DIMENSION))
        room.height = rng.norm_rand(4, min(height - room.y, _MAX_ROOM_DIMENSION))

        ratio = room.width / room.height
        if ratio < 0.5 or ratio > 2.0:
            continue

        rooms.append(room)

    separate(rooms, width, height)
    return rooms


def draw_room(room: Room, level: Grid) -> None:
    """Draw the room's walls and fill its inside with floor."""
    right = room.x + room.width - 1
    bottom = room.y + room.height - 1

    for x in range(room.x, room.x + room.width):
        level[x, room.y] = Basic.WALL
        level[x, bottom] = Basic.WALL
    for y in range(room.y, room.y + room.height):
        level[room.x, y] = Basic.WALL
        level[right, y] = Basic.WALL

    for x in range(room.x + 1, right):
        for y in range(room.y + 1, bottom):
            level[x, y] = Basic.FLOOR


def borders(x: int, y: int, tile: int, level: Grid) -> bool:
    """True if (x, y) or any of its eight neighbours holds ``tile``."""
    return any(
        level.get(x + dx, y + dy, 0) == tile
        for dx in (-1, 0, 1)
        for dy in (-1, 0, 1)
    )


def add_walls(level: Grid) -> bool:
    """Turn blank cells next to floor into wall; report whether any changed."""
    changed = False
    for x in range(level.width):
        for y in range(level.height):
            if level[x, y] == Basic.BLANK and borders(x, y, Basic.FLOOR, level):
                level[x, y] = Basic.WALL
                changed = True
    return changed


def _open_room_walls(room: Room, level: Grid, include_borders: bool) -> None:
    def open_cell(x: int, y: int) -> None:
        if include_borders or not borders(x, y, Basic.BLANK, level):
            level[x, y] = Basic.FLOOR

    for x in range(room.x, room.x + room.width):
        open_cell(x, room.y)
        open_cell(x, room.y + room.height - 1)
    for y in range(room.y, room.y + room.height):
        open_cell(room.x, y)
        open_cell(room.x + room.width - 1, y)


def _cleanup_pass(level: Grid, rooms: list[Room], include_borders: bool) -> bool:
    changed = False
    wall = Basic.WALL
    blank = Basic.BLANK

    for x in range(level.width):
        for y in range(level.height):
            if level[x, y] != wall:
                continue
            on_outside = borders(x, y, blank, level)
            if not include_borders and on_outside:
                continue

            fix_external_t = False
            if include_borders and on_outside:
                outside_neighbours = sum(
                    1
                    for nx, ny in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1))
                    if level.get(nx, ny) == wall and borders(nx, ny, blank, level)
                )
                fix_external_t = outside_neighbours > 2

            double_wall = (
                level.get(x, y + 1) == wall
                and level.get(x + 1, y) == wall
                and level.get(x + 1, y + 1) == wall
            )
            if not (double_wall or fix_external_t):
                continue

            level[x, y] = Basic.FLOOR
            changed = True

            # A room whose wall was broken is merged into its surroundings.
            # After a removal the following room is not examined this time.
            index = 0
            while index < len(rooms):
                if rooms[index].on_border(x, y):
                    _open_room_walls(rooms[index], level, include_borders)
                    del rooms[index]
                index += 1

    return changed


def _is_loose_wall_kind(x: int, y: int, level: Grid, walls_separated: bool) -> bool:
    value = level.get(x, y)
    if walls_separated:
        return value in (Basic.INSIDE_WALL, Basic.DOOR)
    return value in (Basic.WALL, Basic.DOOR)


def _clean_loose_walls(level: Grid, walls_separated: bool) -> None:
    for x in range(level.width):
        for y in range(level.height):
            if not _is_loose_wall_kind(x, y, level, walls_separated):
                continue
            neighbours = ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1))
            if not any(
                _is_loose_wall_kind(nx, ny, level, walls_separated)
                for nx, ny in neighbours
            ):
                level[x, y] = Basic.FLOOR


def cleanup(level: Grid, rooms: list[Room]) -> None:
    """Remove double walls and isolated wall blocks.

    Rooms whose walls get opened up are removed from ``rooms``.
    """
    dirty = _cleanup_pass(level, rooms, False)
    while dirty:
        dirty = _cleanup_pass(level, rooms, True)
        if dirty:
            # Opening walls may leave floor right beside blank cells.
            add_walls(level)
    _clean_loose_walls(level, False)


def _add_doors_along(
    level: Grid, other: int, step: int, start: int, end: int, x_axis: bool
) -> None:
    def position(i: int) -> tuple[int, int]:
        return (i, other) if x_axis else (other, i)

    def value(i: int, offset: int = 0) -> int:
        if x_axis:
            return level.get(i, other + offset)
        return level.get(other + offset, i)

    def place_door(region: list[tuple[int, int]]) -> None:
        level[region[len(region) // 2]] = Basic.DOOR

    region: list[tuple[int, int]] = []
    connected = False
    hole = False

    for i in range(start, end):
        if value(i) in (Basic.FLOOR, Basic.DOOR):
            hole = True
        elif value(i, step) != Basic.FLOOR:
            if hole:
                region.clear()
            hole = False

        if hole:
            continue

        if value(i, step) == Basic.FLOOR:
            if not connected:
                if region:
                    place_door(region)
                region.clear()
                connected = True
            if value(i - 1) == Basic.WALL and value(i + 1) == Basic.WALL:
                region.append(position(i))
        else:
            connected = False

    if not hole and region:
        place_door(region)


def add_doors(level: Grid, rooms: Sequence[Room]) -> None:
    """Put a door in each stretch of room wall that has open floor beyond it."""
    for room in rooms:
        right = room.x + room.width - 1
        bottom = room.y + room.height - 1
        _add_doors_along(level, room.y, -1, room.x + 1, right, True)
        _add_doors_along(level, bottom, 1, room.x + 1, right, True)
        _add_doors_along(level, room.x, -1, room.y + 1, bottom, False)
        _add_doors_along(level, right, 1, room.y + 1, bottom, False)


def _matches(level: Grid, pattern: Sequence[tuple[int, int, int]]) -> bool:
    return all(level.get(x, y) == tile for x, y, tile in pattern)


def place_up_stairs(level: Grid, rooms: Sequence[Room], level_num: int) -> bool:
    """Place the up stairs; report whether a spot was found.

    On levels 1 and 3 the stairs go into the middle of a room's top wall
    with open space behind it; elsewhere in the centre of a large room.
    """
    blank, wall, floor = Basic.BLANK, Basic.WALL, Basic.FLOOR

    if level_num in (1, 3):
        for room in rooms:
            bx = room.x + room.width // 2
            by = room.y
            pattern = [
                (bx + dx, by + dy, tile)
                for dy, tile in ((-2, blank), (-1, blank), (0, wall), (1, floor))
                for dx in (-1, 0, 1)
            ]
            if _matches(level, pattern):
                level[bx, by] = Basic.UP_STAIRS
                return True
        return False

    for room in rooms:
        if room.width >= 6 and room.height >= 6:
            cx, cy = room.centre()
            if level.get(cx, cy) != floor:
                continue
            level[cx, cy] = Basic.UP_STAIRS
            return True
    return False


def place_down_stairs(level: Grid, rooms: Sequence[Room], level_num: int) -> bool:
    """Place the down stairs; report whether a spot was found.

    On level 3 a spot in a room's left wall is tried first. Otherwise the
    centre of a large room is used, searching from the last room and never
    using the first one.
    """
    blank, wall, floor = Basic.BLANK, Basic.WALL, Basic.FLOOR

    if level_num == 3:
        for room in rooms:
            bx = room.x
            by = room.y + room.width // 2
            pattern = [
                (bx - 2, by + 1, blank),
                (bx - 2, by, blank),
                (bx - 1, by + 1, blank),
                (bx - 1, by, blank),
                (bx, by - 1, wall),
                (bx, by, wall),
                (bx, by + 1, wall),
                (bx + 1, by - 1, floor),
                (bx + 1, by, floor),
                (bx + 1, by + 1, floor),
            ]
            if _matches(level, pattern):
                level[bx, by] = Basic.DOWN_STAIRS
                return True

    for room in reversed(rooms[1:]):
        if room.width >= 6 and room.height >= 6:
            cx, cy = room.centre()
            if level.get(cx, cy) != floor:
                continue
            level[cx, cy] = Basic.DOWN_STAIRS
            return True
    return False


def _build_attempt(width: int, height: int, level_num: int) -> Grid | None:
    level = Grid(width, height, Basic.BLANK)

    all_rooms = generate_rooms(width, height)
    rooms = [room for room in all_rooms if room.area() >= ROOM_AREA]
    corridor_rooms = [room for room in all_rooms if room.area() < ROOM_AREA]
    if not rooms:
        return None

    graph = [[a.distance(b) for b in rooms] for a in rooms]
    parent = minimum_spanning_tree(graph)
    for child, parent_index in enumerate(parent):
        if parent_index is not None:
            connect(rooms[parent_index], rooms[child], corridor_rooms, level)

    # Roughly 15% extra links create some loops.
    for _ in range(int(len(rooms) / 100.0 * 15.0)):
        while True:
            a = rng.random_in_range(0, len(rooms) - 1)
            b = rng.random_in_range(0, len(rooms) - 1)
            if a != b and parent[a] != b and parent[b] != a:
                break
        connect(rooms[a], rooms[b], corridor_rooms, level)

    for room in rooms:
        draw_room(room, level)

    add_walls(level)
    cleanup(level, rooms)
    add_doors(level, rooms)

    if not (
        place_up_stairs(level, rooms, level_num)
        and place_down_stairs(level, rooms, level_num)
    ):
        return None

    for x in range(width):
        for y in range(height):
            if level[x, y] == Basic.WALL and not borders(x, y, Basic.BLANK, level):
                level[x, y] = Basic.INSIDE_WALL

    _clean_loose_walls(level, True)
    return level


def generate_flat(width: int, height: int, level_num: int) -> Grid:
    """Generate a flat layout for dungeon level type ``level_num``.

    Generation is repeated until both staircases could be placed.
    """
    while True:
        level = _build_attempt(width, height, level_num)
        if level is not None:
            return level