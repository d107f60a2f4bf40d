# -*- coding: utf-8 -*-
"""
Project: 3D Maze
Author: Jihao Ye
Start Date: 11/21/2025

Brief Description:
    - Maze core: grid, Kruskal generation, solvability repair, collision
    - No graphics imports here; game.py renders and drives this module
    - Language: Python
"""

import math
import numbers
import random
import logging
import operator
from collections import deque, namedtuple

logger = logging.getLogger(__name__)


# -----------------------------
# Configuration
# -----------------------------
MAZE_SIZE = 15
MAZE_COMPLEXITY = 1.0

# Extra shortcuts at complexity c: floor((1 - c) * size^2 * EXTRA_PATH_FACTOR)
EXTRA_PATH_FACTOR = 0.2

# Lengths below are in cell units (one cell is 1 x 1)
WALL_THICKNESS = 0.2
BALL_RADIUS = 0.3
BALL_SPEED = 2.5
MAX_SUBSTEP = 0.25

RIGHT = "right"
BOTTOM = "bottom"

# Discrete avatar steps, (dx, dz)
KEY_STEPS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}


class InvalidMazeParameters(ValueError):
    """
    Raised by generate() for a size or complexity it cannot build from
    """


# -----------------------------
# Maze data structure
# -----------------------------
class Cell:
    """
    One grid position and the two walls it owns
    - wall_right: blocks (x, y) <-> (x + 1, y)
    - wall_bottom: blocks (x, y) <-> (x, y + 1)
    The wall on the left/top of a cell is owned by the neighbor on that side.
    """

    __slots__ = ("x", "y", "wall_right", "wall_bottom")

    def __init__(self, x, y):
        self.x = x
        self.y = y
        self.wall_right = True
        self.wall_bottom = True

    def __repr__(self):
        return (f"Cell({self.x}, {self.y}, right={self.wall_right}, "
                f"bottom={self.wall_bottom})")


class Maze:
    """
    Maze holds the logical size x size grid, row-major: grid[y][x]
    - every wall starts closed; generation only ever opens walls
    - entrance is (0, 0), exit is (size - 1, size - 1)
    """

    def __init__(self, size):
        self.size = size
        self.grid = [[Cell(x, y) for x in range(size)] for y in range(size)]

        self.entrance = (0, 0)
        self.exit = (size - 1, size - 1)

    # ---------- Lookup helpers ----------

    def cell(self, x, y):
        return self.grid[y][x]

    def in_bounds(self, x, y):
        """
        Check if (x, y) is inside the maze grid
        """
        return 0 <= x < self.size and 0 <= y < self.size

    def has_wall_between(self, a, b):
        """
        Symmetric wall query between two cells, whichever one owns the flag.
        Cells that are not grid neighbors are always separated.
        """
        (x1, y1), (x2, y2) = a, b
        if not (self.in_bounds(x1, y1) and self.in_bounds(x2, y2)):
            return True

        dx = x2 - x1
        dy = y2 - y1
        if abs(dx) + abs(dy) != 1:
            return True

        if dx == 1:
            return self.grid[y1][x1].wall_right
        if dx == -1:
            return self.grid[y1][x2].wall_right
        if dy == 1:
            return self.grid[y1][x1].wall_bottom
        return self.grid[y2][x1].wall_bottom

    def open_neighbors(self, x, y):
        """
        Yield the neighbors of (x, y) that can be reached without crossing a wall
        """
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx = x + dx
            ny = y + dy
            if not self.has_wall_between((x, y), (nx, ny)):
                yield nx, ny

    def remove_wall(self, x, y, orientation):
        """
        Open the right or bottom wall owned by cell (x, y)
        """
        if orientation == RIGHT:
            self.grid[y][x].wall_right = False
        elif orientation == BOTTOM:
            self.grid[y][x].wall_bottom = False
        else:
            raise ValueError(f"unknown wall orientation: {orientation!r}")

    def open_edge_count(self):
        """
        Number of internal walls that have been carved open
        """
        last = self.size - 1
        count = 0
        for row in self.grid:
            for cell in row:
                if cell.x < last and not cell.wall_right:
                    count += 1
                if cell.y < last and not cell.wall_bottom:
                    count += 1
        return count

    # ---------- Rendering helpers ----------

    def wall_segments(self):
        """
        Yield (x0, z0, x1, z1) for every wall that should be drawn:
        the four outer borders first, then one segment per closed internal flag
        """
        n = self.size
        yield (0, 0, n, 0)
        yield (0, n, n, n)
        yield (0, 0, 0, n)
        yield (n, 0, n, n)

        for row in self.grid:
            for cell in row:
                x, y = cell.x, cell.y
                if x < n - 1 and cell.wall_right:
                    yield (x + 1, y, x + 1, y + 1)
                if y < n - 1 and cell.wall_bottom:
                    yield (x, y + 1, x + 1, y + 1)

    def to_ascii(self):
        """
        Plain-text picture of the maze, handy in logs and failing tests
        """
        lines = ["+" + "---+" * self.size]
        for row in self.grid:
            middle = "|"
            bottom = "+"
            for cell in row:
                middle += "   " + ("|" if cell.wall_right else " ")
                bottom += ("---" if cell.wall_bottom else "   ") + "+"
            lines.append(middle)
            lines.append(bottom)
        return "\n".join(lines)


# -----------------------------
# Generation
# -----------------------------
class DisjointSet:
    """
    Union-find over cell ids (id = y * size + x)
    - parent pointers with path compression
    - union by size
    """

    def __init__(self, count):
        self.parent = list(range(count))
        self.sizes = [1] * count

    def find(self, i):
        root = i
        while self.parent[root] != root:
            root = self.parent[root]

        # Path compression
        while i != root:
            nxt = self.parent[i]
            self.parent[i] = root
            i = nxt

        return root

    def union(self, a, b):
        """
        Merge the sets holding a and b. Return False if they were already joined.
        """
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return False

        if self.sizes[root_a] < self.sizes[root_b]:
            root_a, root_b = root_b, root_a

        self.parent[root_b] = root_a
        self.sizes[root_a] += self.sizes[root_b]
        return True


class WallCandidate(namedtuple("WallCandidate", ["x", "y", "orientation"])):
    """
    An internal wall owned by cell (x, y), facing right or bottom
    """

    __slots__ = ()

    @property
    def cells(self):
        if self.orientation == RIGHT:
            return (self.x, self.y), (self.x + 1, self.y)
        if self.orientation == BOTTOM:
            return (self.x, self.y), (self.x, self.y + 1)
        raise ValueError(f"unknown wall orientation: {self.orientation!r}")


def wall_candidates(size):
    """
    Every internal wall exactly once: bottom walls above the last row,
    right walls left of the last column
    """
    walls = []
    for y in range(size):
        for x in range(size):
            if y < size - 1:
                walls.append(WallCandidate(x, y, BOTTOM))
            if x < size - 1:
                walls.append(WallCandidate(x, y, RIGHT))
    return walls


def carve_spanning_tree(maze, rng):
    """
    Randomized Kruskal: shuffle all internal walls, then open each wall whose
    two cells are not connected yet. The open passages form a spanning tree.
    """
    size = maze.size
    sets = DisjointSet(size * size)

    walls = wall_candidates(size)
    rng.shuffle(walls)

    carved = 0
    for wall in walls:
        (x1, y1), (x2, y2) = wall.cells
        if sets.union(y1 * size + x1, y2 * size + x2):
            maze.remove_wall(wall.x, wall.y, wall.orientation)
            carved += 1

    return carved


def add_extra_paths(maze, complexity, rng):
    """
    Knock out extra walls for complexity < 1 so easier mazes get loops.
    Returns the number of knock-out attempts (some may hit open walls).
    """
    size = maze.size
    if complexity >= 1 or size < 2:
        return 0

    extra = int(math.floor((1 - complexity) * size * size * EXTRA_PATH_FACTOR))
    for _ in range(extra):
        x = rng.randrange(size - 1)
        y = rng.randrange(size - 1)

        if rng.random() < 0.5:
            maze.grid[y][x].wall_right = False
        else:
            maze.grid[y][x].wall_bottom = False

    return extra


def find_path(maze, start=None, goal=None):
    """
    BFS over open passages.
    Return the list of cells from start to goal, or None if goal is unreachable.
    """
    start = maze.entrance if start is None else tuple(start)
    goal = maze.exit if goal is None else tuple(goal)
    if not (maze.in_bounds(*start) and maze.in_bounds(*goal)):
        return None

    came_from = {start: None}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        if current == goal:
            path = []
            while current is not None:
                path.append(current)
                current = came_from[current]
            path.reverse()
            return path

        for neighbor in maze.open_neighbors(*current):
            if neighbor not in came_from:
                came_from[neighbor] = current
                queue.append(neighbor)

    return None


def is_solvable(maze):
    return find_path(maze) is not None


def carve_staircase(maze):
    """
    Force a monotone path from (0, 0) to the exit: right along the top row,
    then down the last column
    """
    x, y = maze.entrance
    goal_x, goal_y = maze.exit
    while (x, y) != (goal_x, goal_y):
        if x < goal_x:
            maze.grid[y][x].wall_right = False
            x += 1
        else:
            maze.grid[y][x].wall_bottom = False
            y += 1


def ensure_solvable(maze):
    """
    Check entrance -> exit reachability and carve a staircase if it fails.
    Return True if a repair was needed.
    """
    if is_solvable(maze):
        return False

    logger.warning("exit unreachable in %dx%d maze, carving staircase path",
                   maze.size, maze.size)
    carve_staircase(maze)
    return True


def _validate(size, complexity):
    """
    Reject unusable parameters; return size as a plain int
    """
    message = f"size must be an integer >= 1, got {size!r}"
    if isinstance(size, bool):
        raise InvalidMazeParameters(message)
    try:
        size = operator.index(size)
    except TypeError as err:
        raise InvalidMazeParameters(message) from err
    if size < 1:
        raise InvalidMazeParameters(message)

    try:
        value = float(complexity)
    except (TypeError, ValueError) as err:
        raise InvalidMazeParameters(
            f"complexity must be a number, got {complexity!r}") from err
    if not math.isfinite(value):
        raise InvalidMazeParameters(f"complexity must be finite, got {complexity!r}")

    return size


def generate(size, complexity=MAZE_COMPLEXITY, rng=None, seed=None):
    """
    Build a new maze
    - complexity >= 1: perfect maze (exactly one path between any two cells)
    - complexity < 1: extra walls removed in proportion to (1 - complexity)
    - the exit is always reachable from the entrance
    rng is any random.Random-like object; otherwise a local Random(seed) is
    used so seeding does not touch the global random state.
    """
    size = _validate(size, complexity)
    if rng is None:
        rng = random.Random(seed)

    maze = Maze(size)
    carved = carve_spanning_tree(maze, rng)
    extra = add_extra_paths(maze, complexity, rng)
    repaired = ensure_solvable(maze)

    logger.debug("generated %dx%d maze: %d tree walls, %d extra attempts, "
                 "%d open walls, repaired=%s",
                 size, size, carved, extra, maze.open_edge_count(), repaired)
    return maze


# -----------------------------
# Collision
# -----------------------------
def _as_cell_index(value):
    """
    Integer cell coordinate for value, or None if it does not name one.
    Integral floats such as 2.0 are accepted; bools are not.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    try:
        return operator.index(value)
    except TypeError:
        pass

    number = float(value)
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return None


class CollisionOracle:
    """
    Answers "may the entity go there?" against a generated maze
    - can_move: discrete one-cell steps
    - can_move_to: continuous positions for an entity with a radius
    Positions are (x, z) in cell units; cell (i, j) spans [i, i+1) x [j, j+1).
    Queries never raise: anything malformed is simply blocked.
    """

    def __init__(self, maze, wall_thickness=WALL_THICKNESS):
        self.maze = maze
        self.wall_thickness = wall_thickness

    # ---------- Discrete mode ----------

    def can_move(self, from_x, from_z, to_x, to_z):
        coords = [_as_cell_index(v) for v in (from_x, from_z, to_x, to_z)]
        if None in coords:
            return False
        from_x, from_z, to_x, to_z = coords

        if not self.maze.in_bounds(to_x, to_z):
            return False
        if from_x == to_x and from_z == to_z:
            return True
        return not self.maze.has_wall_between((from_x, from_z), (to_x, to_z))

    # ---------- Continuous mode ----------

    def can_move_to(self, current, proposed, radius):
        """
        Decide if an entity of the given radius may go from current to proposed.
        - blocked if it would poke out of the maze bounding box
        - free while it stays in the same cell
        - when it changes cell on an axis, the wall on that boundary must be
          open, or the leading edge must stay short of the wall face
        Steps must stay below one cell; bigger jumps are blocked.
        """
        try:
            cx, cz = (float(v) for v in current)
            px, pz = (float(v) for v in proposed)
            radius = float(radius)
        except (TypeError, ValueError):
            return False
        if not all(math.isfinite(v) for v in (cx, cz, px, pz, radius)):
            return False

        size = self.maze.size
        if px - radius < 0 or px + radius > size:
            return False
        if pz - radius < 0 or pz + radius > size:
            return False

        col0, row0 = int(math.floor(cx)), int(math.floor(cz))
        col1, row1 = int(math.floor(px)), int(math.floor(pz))
        if not (self.maze.in_bounds(col0, row0) and self.maze.in_bounds(col1, row1)):
            return False

        if col0 == col1 and row0 == row1:
            return True

        if col1 != col0:
            if abs(col1 - col0) > 1:
                return False
            owner = min(col0, col1)
            walled = self.maze.grid[row0][owner].wall_right
            if not self._crossing_allowed(walled, owner + 1, px, radius, col1 - col0):
                return False

        if row1 != row0:
            if abs(row1 - row0) > 1:
                return False
            owner = min(row0, row1)
            walled = self.maze.grid[owner][col0].wall_bottom
            if not self._crossing_allowed(walled, owner + 1, pz, radius, row1 - row0):
                return False

        return True

    def _crossing_allowed(self, walled, plane, position, radius, direction):
        """
        Compare the leading edge against the wall face (plane -/+ half thickness)
        """
        if not walled:
            return True

        half = self.wall_thickness / 2.0
        if direction > 0:
            return position + radius <= plane - half
        return position - radius >= plane + half

    def resolve_move(self, current, proposed, radius):
        """
        Commit a continuous move one axis at a time (x first, then z), then keep
        the entity a radius away from the closed walls of the cell it ends in.
        Return the committed (x, z).
        """
        x, z = float(current[0]), float(current[1])
        px, pz = float(proposed[0]), float(proposed[1])

        if self.can_move_to((x, z), (px, z), radius):
            x = px
        if self.can_move_to((x, z), (x, pz), radius):
            z = pz

        return self._keep_clear_of_walls(x, z, radius)

    def _keep_clear_of_walls(self, x, z, radius):
        col, row = int(math.floor(x)), int(math.floor(z))
        if not self.maze.in_bounds(col, row):
            return x, z

        grid = self.maze.grid
        cell = grid[row][col]
        margin = radius + self.wall_thickness / 2.0

        # West / east
        if col == 0 or grid[row][col - 1].wall_right:
            x = max(x, col + margin)
        if cell.wall_right:
            x = min(x, col + 1 - margin)
        # North / south
        if row == 0 or grid[row - 1][col].wall_bottom:
            z = max(z, row + margin)
        if cell.wall_bottom:
            z = min(z, row + 1 - margin)

        return x, z


# -----------------------------
# Ball (continuous movement)
# -----------------------------
class Ball:
    """
    Ball rolls through the maze at constant speed
    - position: [x, z] in cell units, starting at the entrance center
    - direction: unit vector set from input, (0, 0) when idle
    """

    def __init__(self, start_pos, radius=BALL_RADIUS, speed=BALL_SPEED):
        self.position = [float(start_pos[0]), float(start_pos[1])]
        self.radius = radius
        self.speed = speed
        self.direction = (0.0, 0.0)

    def set_direction(self, dx, dz):
        length = math.sqrt(dx * dx + dz * dz)
        if length > 0:
            self.direction = (dx / length, dz / length)
        else:
            self.direction = (0.0, 0.0)

    @property
    def cell(self):
        return int(math.floor(self.position[0])), int(math.floor(self.position[1]))

    def update(self, dt, oracle):
        """
        Advance by speed * dt, in sub-steps no longer than MAX_SUBSTEP so a
        single collision query never spans more than one cell
        """
        dir_x, dir_z = self.direction
        distance = self.speed * dt
        if distance <= 0 or (dir_x == 0 and dir_z == 0):
            return

        steps = max(1, int(math.ceil(distance / MAX_SUBSTEP)))
        step = distance / steps
        for _ in range(steps):
            proposed = (self.position[0] + dir_x * step,
                        self.position[1] + dir_z * step)
            x, z = oracle.resolve_move(self.position, proposed, self.radius)
            self.position[0] = x
            self.position[1] = z

    def set_position(self, x, z):
        """
        Teleport the ball (used for restart/regenerate)
        """
        self.position[0] = float(x)
        self.position[1] = float(z)


# -----------------------------
# Session
# -----------------------------
class MazeSession:
    """
    Everything one play-through needs, owned by the caller
    - maze + oracle, rebuilt by regenerate()
    - avatar cell position, committed move count, solved flag
    """

    def __init__(self, size=MAZE_SIZE, complexity=MAZE_COMPLEXITY, seed=None):
        self.size = size
        self.complexity = complexity
        self.rng = random.Random(seed)

        self.maze = None
        self.oracle = None
        self.position = (0, 0)
        self.moves = 0
        self.solved = False

        self.regenerate()

    def regenerate(self, size=None, complexity=None):
        """
        Build a new maze (optionally with new parameters) and restart
        """
        size = self.size if size is None else size
        complexity = self.complexity if complexity is None else complexity

        maze = generate(size, complexity, rng=self.rng)
        self.size = maze.size
        self.complexity = complexity
        self.maze = maze
        self.oracle = CollisionOracle(maze)
        self.restart()

    def restart(self):
        """
        Put the avatar back at the entrance, keep the maze
        """
        self.position = self.maze.entrance
        self.moves = 0
        self.solved = self.position == self.maze.exit

    def step(self, dx, dz):
        """
        Try a one-cell step. Return True if it was committed.
        """
        x, z = self.position
        if dx == 0 and dz == 0:
            return True

        new_x = x + dx
        new_z = z + dz
        if not self.oracle.can_move(x, z, new_x, new_z):
            return False

        self.position = (new_x, new_z)
        self.moves += 1

        if self.position == self.maze.exit and not self.solved:
            self.solved = True
            logger.info("exit reached in %d moves", self.moves)

        return True

    def step_named(self, direction):
        dx, dz = KEY_STEPS[direction]
        return self.step(dx, dz)

    def ball_start(self):
        """
        Continuous-space center of the entrance cell
        """
        x, z = self.maze.entrance
        return x + 0.5, z + 0.5
