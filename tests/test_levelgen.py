import pytest

from fadungeon import rng
from fadungeon.grid import Grid
from fadungeon.layout import Basic
from fadungeon.levelgen import (
    GeneratedLevel,
    connect_walls,
    fill_isometric,
    generate,
    main,
)
from fadungeon.tileset import TileKind, parse_tileset

_MARKERS = {TileKind.UP_STAIRS, TileKind.DOWN_STAIRS}


def _tileset_text():
    lines = ["[Basic]"]
    for kind in TileKind:
        if kind not in _MARKERS:
            lines.append(f"{kind.key} = {100 + kind.value}")
    lines += ["[DoorMap]", "300 = 301"]
    return "\n".join(lines) + "\n"


@pytest.fixture(scope="module")
def tileset():
    return parse_tileset(_tileset_text())


@pytest.fixture(scope="module")
def generated(tileset):
    rng.seed(1234)
    return generate(40, 40, 5, tileset)


def _flat(width, height, fill):
    return Grid(width, height, fill)


def test_fill_isometric_maps_non_wall_cells():
    flat = _flat(3, 1, Basic.BLANK)
    flat[1, 0] = Basic.FLOOR
    flat[2, 0] = Basic.INSIDE_WALL
    level = Grid(3, 1)
    fill_isometric(flat, level, False, 0, False)
    assert level[0, 0] == TileKind.BLANK
    assert level[1, 0] == TileKind.FLOOR
    assert level[2, 0] == TileKind.INSIDE_X_WALL


def test_fill_isometric_marks_stairs():
    flat = _flat(2, 1, Basic.FLOOR)
    flat[0, 0] = Basic.UP_STAIRS
    flat[1, 0] = Basic.DOWN_STAIRS
    level = Grid(2, 1)
    fill_isometric(flat, level, True, TileKind.INSIDE_X_WALL, True)
    assert level[0, 0] == TileKind.UP_STAIRS
    assert level[1, 0] == TileKind.DOWN_STAIRS


def test_isolated_outside_wall_next_to_blank():
    flat = _flat(3, 3, Basic.BLANK)
    flat[1, 1] = Basic.WALL
    level = Grid(3, 3)
    fill_isometric(flat, level, False, 0, False)
    assert level[1, 1] == TileKind.OUTSIDE_Y_WALL


def test_isolated_wall_surrounded_by_floor_is_wall_end():
    flat = _flat(3, 3, Basic.FLOOR)
    flat[1, 1] = Basic.WALL
    level = Grid(3, 3)
    fill_isometric(flat, level, False, 0, False)
    assert level[1, 1] == TileKind.INSIDE_Y_WALL_END


def test_horizontal_wall_row_is_x_wall():
    flat = _flat(3, 3, Basic.BLANK)
    for x in range(3):
        flat[x, 1] = Basic.WALL
        flat[x, 2] = Basic.FLOOR
    level = Grid(3, 3)
    fill_isometric(flat, level, False, 0, False)
    assert level[1, 1] == TileKind.X_WALL


def test_inside_door_becomes_door_tile():
    flat = _flat(3, 3, Basic.FLOOR)
    flat[1, 1] = Basic.DOOR
    level = Grid(3, 3, 0)
    fill_isometric(flat, level, True, TileKind.INSIDE_X_WALL, True)
    assert level[1, 1] == TileKind.Y_DOOR
    # Non-wall cells are left alone when ignoring them.
    assert level[0, 0] == 0


def test_connect_walls_joins_y_wall():
    level = Grid(2, 1, TileKind.FLOOR)
    level[0, 0] = TileKind.Y_WALL
    level[1, 0] = TileKind.INSIDE_X_WALL
    connect_walls(level)
    assert level[0, 0] == TileKind.JOIN_Y


def test_connect_walls_joins_x_wall():
    level = Grid(1, 2, TileKind.FLOOR)
    level[0, 0] = TileKind.X_WALL
    level[0, 1] = TileKind.INSIDE_Y_WALL
    connect_walls(level)
    assert level[0, 0] == TileKind.JOIN_X


def test_connect_walls_bottom_corner_both_sides():
    level = Grid(2, 2, TileKind.FLOOR)
    level[0, 0] = TileKind.BOTTOM_CORNER
    level[1, 0] = TileKind.INSIDE_X_WALL
    level[0, 1] = TileKind.INSIDE_Y_WALL
    connect_walls(level)
    assert level[0, 0] == TileKind.JOIN_BOTTOM_CORNER


def test_connect_walls_leaves_edge_walls_alone():
    level = Grid(1, 1, TileKind.Y_WALL)
    connect_walls(level)
    assert level[0, 0] == TileKind.Y_WALL


def test_generate_rejects_level_zero(tileset):
    with pytest.raises(ValueError):
        generate(40, 40, 0, tileset)


def test_generated_level_paths(generated):
    assert isinstance(generated, GeneratedLevel)
    assert generated.level_num == 2
    assert generated.cel_path == "levels/l2data/l2.cel"
    assert generated.til_path == "levels/l2data/l2.til"
    assert generated.min_path == "levels/l2data/l2.min"
    assert generated.sol_path == "levels/l2data/l2.sol"


def test_generated_tiles_all_from_tileset(generated, tileset):
    allowed = set(tileset.tiles.values())
    assert {value for _, _, value in generated.tiles.cells()} <= allowed
    assert (generated.tiles.width, generated.tiles.height) == (40, 40)


def test_generated_stairs_blocks(generated, tileset):
    ux, uy = generated.up_stairs[0] // 2, generated.up_stairs[1] // 2
    dx, dy = generated.down_stairs[0] // 2, generated.down_stairs[1] // 2
    assert generated.up_stairs[0] % 2 == 0 and generated.up_stairs[1] % 2 == 0
    assert generated.tiles[ux, uy] == tileset.convert(TileKind.UP_STAIRS_5)
    assert generated.tiles[ux - 1, uy - 1] == tileset.convert(TileKind.UP_STAIRS_1)
    assert generated.tiles[ux + 1, uy + 1] == tileset.convert(TileKind.UP_STAIRS_9)
    assert generated.tiles[dx, dy] == tileset.convert(TileKind.DOWN_STAIRS_5)
    assert generated.tiles[dx + 1, dy - 1] == tileset.convert(TileKind.DOWN_STAIRS_3)


def test_generated_door_map(generated, tileset):
    assert generated.door_map == tileset.door_map
    assert generated.door_map[301] == 300


def test_main_prints_rows(tmp_path, capsys):
    path = tmp_path / "tiles.ini"
    path.write_text(_tileset_text(), encoding="utf-8")
    code = main(
        ["--width", "40", "--height", "40", "--dlvl", "5",
         "--tileset", str(path), "--seed", "7"]
    )
    lines = capsys.readouterr().out.splitlines()
    assert code == 0
    assert len(lines) == 40
    assert all(len(line.split()) == 40 for line in lines)


def test_main_reports_missing_tileset(tmp_path, capsys):
    code = main(["--tileset", str(tmp_path / "missing.ini"), "--seed", "1"])
    assert code == 1
    assert "missing.ini" in capsys.readouterr().err