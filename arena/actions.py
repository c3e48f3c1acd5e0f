"""Legal action generation for a single unit."""
from typing import List, Set
from .model import Action, Attack, Move, Position, State, Unit
from .spatial import distance, has_line_of_sight, is_passable


def _occupied_cells(state: State) -> Set[Position]:
    return {(u.x, u.z) for u in state.all_units() if u.health > 0}


def valid_moves(state: State, unit: Unit) -> List[Move]:
    """Every passable, unoccupied tile in the square envelope of the unit's speed.

    Blockers between the unit and the target do not matter; only the
    target tile is checked.
    """
    moves: List[Move] = []
    reach = unit.speed or 1
    occupied = _occupied_cells(state)
    for dx in range(-reach, reach + 1):
        for dz in range(-reach, reach + 1):
            if dx == 0 and dz == 0:
                continue
            nx, nz = unit.x + dx, unit.z + dz
            if is_passable(state.grid, nx, nz) and (nx, nz) not in occupied:
                moves.append(Move(nx, nz))
    return moves


def valid_attacks(state: State, unit: Unit) -> List[Attack]:
    """Living enemies within weapon range and in line of sight, roster order."""
    attacks: List[Attack] = []
    for enemy in state.enemies(unit.side):
        if enemy.health <= 0:
            continue
        if distance(unit.pos, enemy.pos) <= unit.range and has_line_of_sight(state.grid, unit.pos, enemy.pos):
            attacks.append(Attack(enemy.id))
    return attacks


def all_actions(state: State, unit: Unit) -> List[Action]:
    """Moves first, then attacks. Both policies break ties on this order."""
    return [*valid_moves(state, unit), *valid_attacks(state, unit)]
