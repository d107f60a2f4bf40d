# tests/test_collision.py
import os
import sys

import pytest

CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from maze import BALL_RADIUS, Ball, CollisionOracle, Maze, generate


def _corridor_maze():
    """
    3x3 maze with a known layout:
        (0,0) - (1,0) | (2,0)
          |               |
        (0,1)   (1,1)   (2,1)
    Only (0,0)<->(1,0), (0,0)<->(0,1) and (2,0)<->(2,1) are open.
    """
    maze = Maze(3)
    maze.grid[0][0].wall_right = False
    maze.grid[0][0].wall_bottom = False
    maze.grid[0][2].wall_bottom = False
    return maze


# ---------- Discrete mode ----------

def test_can_move_matches_right_flags():
    maze = generate(8, 0.4, seed=11)
    oracle = CollisionOracle(maze)

    for z in range(8):
        for x in range(7):
            assert oracle.can_move(x, z, x + 1, z) == (not maze.grid[z][x].wall_right)
            assert oracle.can_move(x + 1, z, x, z) == (not maze.grid[z][x].wall_right)


def test_can_move_matches_bottom_flags():
    maze = generate(8, 0.4, seed=12)
    oracle = CollisionOracle(maze)

    for z in range(7):
        for x in range(8):
            assert oracle.can_move(x, z, x, z + 1) == (not maze.grid[z][x].wall_bottom)
            assert oracle.can_move(x, z + 1, x, z) == (not maze.grid[z][x].wall_bottom)


@pytest.mark.parametrize("target", [(-1, 0), (0, -1), (3, 2), (2, 3), (5, 5)])
def test_can_move_out_of_bounds_is_blocked(target):
    maze = Maze(3)
    for row in maze.grid:
        for cell in row:
            cell.wall_right = False
            cell.wall_bottom = False
    oracle = CollisionOracle(maze)

    x, z = min(max(target[0], 0), 2), min(max(target[1], 0), 2)
    assert oracle.can_move(x, z, *target) is False


def test_can_move_noop_is_allowed():
    oracle = CollisionOracle(Maze(3))

    assert oracle.can_move(1, 1, 1, 1)


def test_can_move_diagonal_is_blocked():
    maze = Maze(2)
    for row in maze.grid:
        for cell in row:
            cell.wall_right = False
            cell.wall_bottom = False

    assert CollisionOracle(maze).can_move(0, 0, 1, 1) is False


def test_has_wall_between_is_symmetric():
    maze = _corridor_maze()

    assert not maze.has_wall_between((0, 0), (1, 0))
    assert not maze.has_wall_between((1, 0), (0, 0))
    assert maze.has_wall_between((1, 0), (2, 0))
    assert maze.has_wall_between((2, 0), (1, 0))
    assert not maze.has_wall_between((2, 1), (2, 0))
    assert maze.has_wall_between((0, 0), (2, 0))
    assert set(maze.open_neighbors(0, 0)) == {(1, 0), (0, 1)}


# ---------- Continuous mode ----------

def test_same_cell_always_allowed():
    oracle = CollisionOracle(Maze(3))

    assert oracle.can_move_to((1.5, 1.5), (1.1, 1.9), 0.05)
    assert oracle.can_move_to((1.5, 1.5), (1.95, 1.05), 0.01)


def test_outer_boundary_blocks_radius_overlap():
    maze = _corridor_maze()
    oracle = CollisionOracle(maze)

    assert not oracle.can_move_to((0.5, 0.5), (0.2, 0.5), BALL_RADIUS)
    assert not oracle.can_move_to((0.5, 0.5), (0.5, 0.25), BALL_RADIUS)
    assert not oracle.can_move_to((2.5, 1.5), (2.8, 1.5), BALL_RADIUS)
    assert oracle.can_move_to((0.5, 0.5), (0.3, 0.5), BALL_RADIUS)


def test_crossing_open_wall_allowed():
    oracle = CollisionOracle(_corridor_maze())

    assert oracle.can_move_to((0.9, 0.5), (1.1, 0.5), BALL_RADIUS)
    assert oracle.can_move_to((1.1, 0.5), (0.9, 0.5), BALL_RADIUS)
    assert oracle.can_move_to((0.5, 0.9), (0.5, 1.1), BALL_RADIUS)


def test_crossing_closed_wall_blocked():
    oracle = CollisionOracle(_corridor_maze())

    # (1,0) | (2,0)
    assert not oracle.can_move_to((1.9, 0.5), (2.05, 0.5), 0.01)
    assert not oracle.can_move_to((2.05, 0.5), (1.9, 0.5), 0.01)
    # (1,0) over (1,1)
    assert not oracle.can_move_to((1.5, 0.95), (1.5, 1.05), 0.01)
    assert not oracle.can_move_to((1.5, 1.05), (1.5, 0.95), 0.01)


def test_multi_cell_jump_blocked():
    maze = Maze(4)
    for row in maze.grid:
        for cell in row:
            cell.wall_right = False
            cell.wall_bottom = False
    oracle = CollisionOracle(maze)

    assert not oracle.can_move_to((0.5, 0.5), (2.5, 0.5), 0.1)


@pytest.mark.parametrize("bad", [
    (float("nan"), 0.5),
    (0.5, float("inf")),
    ("x", 0.5),
])
def test_malformed_positions_blocked(bad):
    oracle = CollisionOracle(Maze(3))

    assert oracle.can_move_to((0.5, 0.5), bad, 0.1) is False


@pytest.mark.parametrize("coords", [
    (None, 0, 1, 0),
    (0, 0, "x", 0),
    (float("nan"), 0, 1, 0),
    (0, 0, 0.5, 0),
    (True, 0, 1, 0),
    (0, 0, 1, float("inf")),
])
def test_can_move_malformed_coordinates_blocked(coords):
    maze = Maze(3)
    for row in maze.grid:
        for cell in row:
            cell.wall_right = False
            cell.wall_bottom = False

    assert CollisionOracle(maze).can_move(*coords) is False


def test_can_move_accepts_integral_floats():
    maze = generate(3, seed=0)
    oracle = CollisionOracle(maze)

    assert oracle.can_move(0.0, 0, 1.0, 0) == oracle.can_move(0, 0, 1, 0)
    assert oracle.can_move(0, 0.0, 0, 1.0) == oracle.can_move(0, 0, 0, 1)
    assert oracle.can_move(1.0, 1.0, 1, 1)


def test_collision_uses_actual_maze_size():
    maze = Maze(20)
    for row in maze.grid:
        for cell in row:
            cell.wall_right = False
    oracle = CollisionOracle(maze)

    assert oracle.can_move_to((15.9, 0.5), (16.1, 0.5), BALL_RADIUS)


# ---------- resolve_move / Ball ----------

def test_resolve_move_slides_along_wall():
    oracle = CollisionOracle(_corridor_maze())

    # Pushing into the closed wall between (1,0) and (2,0) while moving down
    # keeps x short of the wall face.
    x, z = oracle.resolve_move((1.5, 0.5), (1.95, 0.6), BALL_RADIUS)
    assert x == pytest.approx(2 - BALL_RADIUS - 0.1)
    assert z == pytest.approx(0.6)


def test_resolve_move_passes_open_wall():
    oracle = CollisionOracle(_corridor_maze())

    x, z = oracle.resolve_move((0.9, 0.5), (1.1, 0.5), BALL_RADIUS)
    assert (x, z) == pytest.approx((1.1, 0.5))


def test_ball_never_leaves_reachable_cells():
    maze = _corridor_maze()
    oracle = CollisionOracle(maze)
    ball = Ball((0.5, 0.5))

    for direction in [(1, 0), (0, 1), (1, 1), (-1, 0), (0, -1), (1, -1)]:
        ball.set_direction(*direction)
        for _ in range(60):
            ball.update(1 / 30.0, oracle)
            assert ball.cell in {(0, 0), (1, 0), (0, 1)}


def test_ball_reaches_neighbor_through_open_wall():
    oracle = CollisionOracle(_corridor_maze())
    ball = Ball((0.5, 0.5))
    ball.set_direction(1, 0)

    ball.update(0.4, oracle)

    assert ball.cell == (1, 0)


def test_idle_ball_does_not_move():
    oracle = CollisionOracle(_corridor_maze())
    ball = Ball((0.5, 0.5))
    ball.set_direction(0, 0)

    ball.update(1.0, oracle)

    assert ball.position == [0.5, 0.5]
