# fadungeon

Procedural generation of dungeon levels for isometric role-playing games.

A level is built in two stages:

1. **Flat layout** (`fadungeon.layout`): rooms are scattered around the map
   centre, pushed apart with separation steering, and split into real rooms
   (area of at least `ROOM_AREA`, 30 cells) and smaller corridor rooms. A
   minimum spanning tree (`fadungeon.mst`) joins the real rooms with
   L-shaped corridors three cells wide, and about 15% extra random links
   add loops. Walls, doors and up/down stairs are then placed, and double
   walls and isolated wall blocks are cleaned away.
2. **Tiles** (`fadungeon.levelgen`): every wall cell of the flat layout gets
   an orientation (x wall, y wall, corners, wall ends, doors), inside and
   outside walls are told apart and joined where they meet, and each tile
   kind is mapped to a tile number from a tile set (`fadungeon.tileset`),
   with optional weighted random variants. Finally a 3×3 block of stair
   tiles is placed around each staircase.

## Installation

```
pip install .
```

Nothing outside the standard library is needed. To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
fadungeon [--width W] [--height H] [--dlvl N] [--tileset FILE] [--seed S]
```

Generates one level and prints its tile numbers, one row per line, numbers
separated by spaces.

- `--width`, `--height`: map size, default 85 by 75.
- `--dlvl`: dungeon level, 1 or more (default 1). Levels 1–4 use level
  type 1, 5–8 type 2, and so on.
- `--tileset`: tile set INI file; defaults to
  `resources/tilesets/l<type>.ini` relative to the current directory.
- `--seed`: random seed; defaults to the current time.

If the tile set cannot be read or parsed, an error is printed to standard
error and the exit status is 1.

## Library use

### Randomness

All randomness goes through `fadungeon.rng`: `seed(value)`,
`random_in_range(minimum, maximum)` (inclusive on both ends),
`norm_rand(minimum, maximum)` (a normal draw centred on `minimum`,
redrawn until it falls in the range) and `choose_one(options)`. Seeding once
makes the whole generation repeatable. Empty ranges raise `ValueError`.

### Grids

`fadungeon.grid.Grid(width, height, fill=0)` is a fixed-size grid of
integers addressed as `grid[x, y]`; out-of-range indexing raises
`IndexError`. `get(x, y, default)` returns `default` outside the grid,
`fill(value)` sets every cell, and `cells()` yields `(x, y, value)` with x
outermost. `(x, y) in grid` tests bounds.

### Flat layouts

```python
from fadungeon import rng
from fadungeon.layout import generate_flat, Basic

rng.seed(1234)
flat = generate_flat(85, 75, 1)     # width, height, level type
```

`generate_flat` returns a `Grid` whose cells hold `Basic` values: `BLANK`,
`FLOOR`, `WALL`, `INSIDE_WALL`, `DOOR`, `UP_STAIRS` and `DOWN_STAIRS`. It
keeps trying until both staircases could be placed.

The steps are available on their own too: `Room` (with `intersects`,
`on_border`, `centre`, `area`, `distance`), `generate_rooms`, `separate`,
`remove_overlaps`, `connect`, `draw_room`, `borders`, `add_walls`,
`cleanup`, `add_doors`, `place_up_stairs` and `place_down_stairs`.

`fadungeon.mst.minimum_spanning_tree(graph)` takes a square weight matrix
(zero meaning no edge) and returns each vertex's parent, with `None` for
vertex 0.

### Tile sets

A tile set is an INI file:

- `[Basic]` gives the tile number for every tile kind, keyed by its lower
  camel case name (`xWall`, `outsideXWall`, `floor`, `upStairs1`, …,
  `downStairs9`). All of them are required.
- An optional section per kind (`XWall`, `outsideXWall`, `YWall`,
  `Floor`, `JoinY`, …) lists alternative tile numbers as keys with their
  weights as values, plus a required `normal` percentage for keeping the
  plain tile.
- An optional `[DoorMap]` pairs closed and open door tiles; the map is
  filled in both directions.

```python
from fadungeon.tileset import load_tileset, parse_tileset, TileKind

tileset = load_tileset("l1.ini")    # or parse_tileset(text)
tileset.convert(TileKind.FLOOR)     # tile number for a kind
tileset.random_tile(13)             # the tile, or one of its alternatives
```

`convert` raises `ValueError` for the `UP_STAIRS` and `DOWN_STAIRS` markers,
which have no tile number. Missing keys or non-integer values raise
`ValueError` when parsing.

### Full levels

```python
from fadungeon.levelgen import generate, tileset_path

level = generate(85, 75, 1, tileset)   # width, height, dungeon level, tile set
level.tiles          # Grid of tile numbers
level.up_stairs      # (x, y) in doubled coordinates
level.down_stairs
level.door_map
level.cel_path       # "levels/l1data/l1.cel"; also til_path, min_path, sol_path
```

`tileset_path(dlvl)` gives the conventional tile set file for a dungeon
level. `fill_isometric` and `connect_walls` expose the tile orientation
steps.

## What the package does not do

It only generates level data. It does not read the asset files whose paths
`GeneratedLevel` reports, draw or render levels, place monsters or items,
or run a game; those are left to the program that uses the levels.