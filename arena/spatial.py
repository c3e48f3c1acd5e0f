"""Grid geometry: distance, bounds, occupancy, line of sight and cover."""
from typing import Iterable
from .model import GRID_SIZE, Position, State, Unit
from .terrain import Grid

ORTHOGONAL = ((-1, 0), (1, 0), (0, -1), (0, 1))


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def distance(a: Position, b: Position) -> int:
    """Chebyshev distance, used for both weapon range and movement."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def is_valid_position(x: int, z: int, size: int = GRID_SIZE) -> bool:
    return 0 <= x < size and 0 <= z < size


def is_passable(grid: Grid, x: int, z: int) -> bool:
    if not grid.in_bounds(x, z):
        return False
    return grid.props_at(x, z).passable


def is_occupied(state: State, x: int, z: int) -> bool:
    """True if a living unit of either side stands on (x, z)."""
    return any(u.health > 0 and u.x == x and u.z == z for u in state.all_units())


def can_see_through(grid: Grid, x: int, z: int) -> bool:
    if not grid.in_bounds(x, z):
        return False
    props = grid.props_at(x, z)
    return props.passable or props.shoot_through


def has_line_of_sight(grid: Grid, src: Position, dst: Position) -> bool:
    """Step from src towards dst one tile at a time.

    Each axis advances by its sign until it reaches the target coordinate,
    so off-axis lines walk a staircase rather than a true ray. The
    destination tile itself never blocks.
    """
    dx = _sign(dst[0] - src[0])
    dz = _sign(dst[1] - src[1])
    x = src[0] + dx
    z = src[1] + dz

    while x != dst[0] or z != dst[1]:
        if not can_see_through(grid, x, z):
            return False
        if x != dst[0]:
            x += dx
        if z != dst[1]:
            z += dz
    return True


def cover_at(grid: Grid, x: int, z: int) -> int:
    """Best cover offered by the four orthogonal neighbours of (x, z)."""
    best = 0
    for dx, dz in ORTHOGONAL:
        nx, nz = x + dx, z + dz
        if grid.in_bounds(nx, nz):
            best = max(best, grid.props_at(nx, nz).cover)
    return best


def cover_bonus(grid: Grid, unit: Unit) -> int:
    return cover_at(grid, unit.x, unit.z)


def nearest_distance(pos: Position, units: Iterable[Unit]) -> float:
    """Distance to the closest living unit, inf when there is none."""
    best = float("inf")
    for u in units:
        if u.health > 0:
            d = distance(pos, (u.x, u.z))
            if d < best:
                best = d
    return best
