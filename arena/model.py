import itertools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Literal, Optional, Tuple, Union
from enum import Enum

if TYPE_CHECKING:
    from .terrain import Grid

Side = Literal["RED", "BLUE"]
Position = Tuple[int, int]  # (x, z) grid coordinates

GRID_SIZE = 8

_unit_ids = itertools.count(1)


def other_side(side: Side) -> Side:
    return "BLUE" if side == "RED" else "RED"


class TileKind(Enum):
    """What occupies a grid cell"""
    EMPTY = "empty"
    WALL = "wall"
    DOOR = "door"
    WINDOW = "window"
    TREE = "tree"
    CRATE = "crate"
    POWERUP = "powerup"


@dataclass(frozen=True)
class TileProps:
    """Static properties shared by every tile of one kind"""
    name: str
    passable: bool
    cover: int  # 0-100, damage soaked by a unit standing next to it
    shoot_through: bool = False
    move_cost: int = 1  # kept as map data, movement ignores it
    destructible: bool = False
    health: Optional[int] = None
    points: int = 0


TILE_PROPS: Dict[TileKind, TileProps] = {
    TileKind.EMPTY: TileProps(name="Floor", passable=True, cover=0),
    TileKind.WALL: TileProps(name="Wall", passable=False, cover=100),
    TileKind.DOOR: TileProps(name="Door", passable=True, cover=0, move_cost=2),
    TileKind.WINDOW: TileProps(name="Window", passable=False, cover=15, shoot_through=True),
    TileKind.TREE: TileProps(name="Tree", passable=False, cover=10),
    TileKind.CRATE: TileProps(name="Crate", passable=False, cover=20, destructible=True, health=50),
    TileKind.POWERUP: TileProps(name="Power-up", passable=True, cover=0, points=50),
}


@dataclass
class UnitType:
    """Template defining characteristics of a unit type"""
    name: str
    max_health: int
    attack: int
    range: int  # Chebyshev tiles
    crit_chance: float
    speed: int = 1  # move envelope half-width


# Predefined unit types
UNIT_TYPES = {
    "SOLDIER": UnitType(name="Soldier", max_health=100, attack=25, range=2, crit_chance=0.15),
    "SNIPER": UnitType(name="Sniper", max_health=60, attack=45, range=4, crit_chance=0.30),
    "HEAVY": UnitType(name="Heavy", max_health=180, attack=20, range=1, crit_chance=0.05),
    "SCOUT": UnitType(name="Scout", max_health=70, attack=20, range=2, crit_chance=0.20, speed=2),
}

# Score table
POINTS = {
    "DAMAGE": 2,  # per point of damage dealt
    "KILL": 500,
    "CRITICAL": 100,
    "FIRST_BLOOD": 300,
    "POWERUP": TILE_PROPS[TileKind.POWERUP].points,
    "DOOR_USE": 20,
    "VICTORY": 1000,
    "FLAWLESS": 500,
    "DOMINATION": 300,
}

FULL_SQUAD = 4  # alive count that earns the flawless bonus
DOMINATION_MIN_ALIVE = 3


@dataclass
class Unit:
    id: str
    side: Side
    unit_type_id: str  # Key into UNIT_TYPES
    x: int
    z: int
    health: int
    max_health: int
    attack: int
    range: int
    crit_chance: float
    speed: int = 1

    @property
    def pos(self) -> Position:
        return (self.x, self.z)

    @property
    def alive(self) -> bool:
        return self.health > 0


def make_unit(unit_type_id: str, side: Side, x: int, z: int, uid: Optional[str] = None) -> Unit:
    """Instantiate a unit with the base stats of its archetype."""
    t = UNIT_TYPES[unit_type_id]
    if uid is None:
        uid = f"{side[0]}-{unit_type_id}-{next(_unit_ids)}"
    return Unit(id=uid, side=side, unit_type_id=unit_type_id, x=x, z=z,
                health=t.max_health, max_health=t.max_health, attack=t.attack,
                range=t.range, crit_chance=t.crit_chance, speed=t.speed)


@dataclass(frozen=True)
class Move:
    x: int
    z: int
    kind: Literal["move"] = "move"


@dataclass(frozen=True)
class Attack:
    target_id: str
    kind: Literal["attack"] = "attack"


Action = Union[Move, Attack]


@dataclass
class Event:
    kind: str
    turn: int
    data: Dict


class MatchStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class Scores:
    red: int = 0
    blue: int = 0
    total: int = 0

    def add(self, side: Side, amount: int) -> None:
        if side == "RED":
            self.red += amount
        else:
            self.blue += amount
        self.total += amount


@dataclass
class Stats:
    damage: int = 0
    kills: int = 0
    crits: int = 0
    powerups: int = 0


@dataclass
class State:
    grid: "Grid"
    red: List[Unit] = field(default_factory=list)
    blue: List[Unit] = field(default_factory=list)
    current_side: Side = "RED"
    round: int = 1
    turn: int = 0
    first_blood: bool = False
    status: MatchStatus = MatchStatus.IDLE
    winner: Optional[Side] = None
    initial_counts: Dict[str, int] = field(default_factory=dict)
    scores: Scores = field(default_factory=Scores)
    stats: Stats = field(default_factory=Stats)
    battle_id: str = "local"

    def __post_init__(self):
        if not self.initial_counts:
            self.initial_counts = {"RED": len(self.red), "BLUE": len(self.blue)}

    def roster(self, side: Side) -> List[Unit]:
        return self.red if side == "RED" else self.blue

    def enemies(self, side: Side) -> List[Unit]:
        return self.blue if side == "RED" else self.red

    def living(self, side: Side) -> List[Unit]:
        return [u for u in self.roster(side) if u.health > 0]

    def all_units(self) -> List[Unit]:
        return self.red + self.blue

    def find_unit(self, unit_id: str) -> Optional[Unit]:
        for u in self.red:
            if u.id == unit_id:
                return u
        for u in self.blue:
            if u.id == unit_id:
                return u
        return None

    def is_over(self) -> bool:
        """Either side has no living units."""
        return not any(u.alive for u in self.red) or not any(u.alive for u in self.blue)

