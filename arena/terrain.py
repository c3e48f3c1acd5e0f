from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from .model import GRID_SIZE, TILE_PROPS, TileKind, TileProps

# Fixed arena layout, (x, z) coordinates
MAP_LAYOUT: Dict[TileKind, List[Tuple[int, int]]] = {
    # Building outline plus the 2x2 centre structure
    TileKind.WALL: [(3, 0), (4, 0), (3, 7), (4, 7), (0, 3), (0, 4), (7, 3), (7, 4),
                    (3, 3), (4, 3), (3, 4), (4, 4)],
    TileKind.DOOR: [(3, 2), (4, 5), (2, 3), (5, 4)],
    TileKind.WINDOW: [(2, 0), (5, 0), (2, 7), (5, 7), (0, 2), (0, 5), (7, 2), (7, 5)],
    TileKind.TREE: [(1, 1), (6, 1), (1, 6), (6, 6)],
    TileKind.CRATE: [(2, 2), (5, 2), (2, 5), (5, 5)],
    TileKind.POWERUP: [(3, 1), (4, 6), (1, 4), (6, 3)],
}


@dataclass
class Tile:
    x: int
    z: int
    kind: TileKind = TileKind.EMPTY
    health: Optional[int] = None  # only destructible tiles carry health

    @property
    def props(self) -> TileProps:
        return TILE_PROPS[self.kind]


class Grid:
    """Square board of tiles indexed as tiles[x][z]."""

    def __init__(self, size: int = GRID_SIZE):
        self.size = size
        self.tiles: List[List[Tile]] = [[Tile(x, z) for z in range(size)] for x in range(size)]

    def in_bounds(self, x: int, z: int) -> bool:
        return 0 <= x < self.size and 0 <= z < self.size

    def tile(self, x: int, z: int) -> Tile:
        return self.tiles[x][z]

    def kind_at(self, x: int, z: int) -> TileKind:
        return self.tiles[x][z].kind

    def props_at(self, x: int, z: int) -> TileProps:
        return TILE_PROPS[self.tiles[x][z].kind]

    def set_kind(self, x: int, z: int, kind: TileKind) -> None:
        t = self.tiles[x][z]
        t.kind = kind
        t.health = TILE_PROPS[kind].health

    def positions_of(self, kind: TileKind) -> List[Tuple[int, int]]:
        return [(t.x, t.z) for col in self.tiles for t in col if t.kind == kind]

    def kinds(self) -> Tuple[Tuple[str, ...], ...]:
        """Read-only view of tile kinds, [x][z]."""
        return tuple(tuple(t.kind.value for t in col) for col in self.tiles)


def generate_map() -> Grid:
    """Build the fixed arena: enclosure, centre block, doors, windows and props."""
    grid = Grid(GRID_SIZE)
    for kind, cells in MAP_LAYOUT.items():
        for x, z in cells:
            grid.set_kind(x, z, kind)
    return grid


def empty_map(size: int = GRID_SIZE) -> Grid:
    """Open board with no features. Used for scenario setups."""
    return Grid(size)
