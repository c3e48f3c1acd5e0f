"""Minimax with alpha-beta pruning for the RED side.

The search explores the tree by mutating the live ``State`` in place and
rolling each change back before the next sibling is tried. Only unit
positions and unit health are ever touched; scores, stats, tiles and the
event stream are left alone so a decision has no observable side effects.
"""
import math
from dataclasses import dataclass
from typing import Optional, Tuple
from .actions import all_actions
from .model import Action, Attack, Move, Side, State, Unit, other_side
from .spatial import cover_bonus, nearest_distance

SEARCH_DEPTH = 2  # plies searched below each root action

# evaluate() weights
HEALTH_WEIGHT = 2
ATTACK_WEIGHT = 1.5
ALIVE_BONUS = 80
COVER_WEIGHT = 2
IN_RANGE_BONUS = 40


@dataclass
class Undo:
    """Fields overwritten by apply_action, restored by undo_action."""
    unit: Unit
    action: Action
    old_x: int
    old_z: int
    target: Optional[Unit] = None
    target_health: Optional[int] = None


def apply_action(state: State, unit: Unit, action: Action) -> Undo:
    """Apply an action for search purposes only.

    Attacks subtract the raw attack value: no crit roll, no cover.
    """
    undo = Undo(unit=unit, action=action, old_x=unit.x, old_z=unit.z)
    if isinstance(action, Move):
        unit.x = action.x
        unit.z = action.z
    elif isinstance(action, Attack):
        target = state.find_unit(action.target_id)
        if target is not None:
            undo.target = target
            undo.target_health = target.health
            target.health -= unit.attack
    return undo


def undo_action(undo: Undo) -> None:
    if isinstance(undo.action, Move):
        undo.unit.x = undo.old_x
        undo.unit.z = undo.old_z
    elif undo.target is not None:
        undo.target.health = undo.target_health


class MinimaxPolicy:
    """Depth-limited adversarial search; maximizes for its own side."""

    def __init__(self, side: Side = "RED", depth: int = SEARCH_DEPTH):
        self.side = side
        self.depth = depth
        self.nodes = 0  # nodes visited by the last choose_action call

    def evaluate(self, state: State) -> float:
        """Static board score from the maximizer's point of view.

        The in-range bonus is only credited to the maximizer, which pushes
        it towards aggressive positioning.
        """
        grid = state.grid
        enemy_side = other_side(self.side)
        enemies = state.roster(enemy_side)
        score = 0.0
        for u in state.roster(self.side):
            if u.health <= 0:
                continue
            score += u.health * HEALTH_WEIGHT
            score += u.attack * ATTACK_WEIGHT
            score += ALIVE_BONUS
            score += cover_bonus(grid, u) * COVER_WEIGHT
            if nearest_distance(u.pos, enemies) <= u.range:
                score += IN_RANGE_BONUS
        for u in enemies:
            if u.health <= 0:
                continue
            score -= u.health * HEALTH_WEIGHT
            score -= u.attack * ATTACK_WEIGHT
            score -= ALIVE_BONUS
            score -= cover_bonus(grid, u) * COVER_WEIGHT
        return score

    def search(self, state: State, depth: int, maximizing: bool,
               alpha: float = -math.inf, beta: float = math.inf) -> float:
        """Alpha-beta minimax value of the current position."""
        self.nodes += 1
        if depth == 0 or state.is_over():
            return self.evaluate(state)

        side = self.side if maximizing else other_side(self.side)
        units = state.living(side)

        if maximizing:
            best = -math.inf
            for unit in units:
                for action in all_actions(state, unit):
                    undo = apply_action(state, unit, action)
                    score = self.search(state, depth - 1, False, alpha, beta)
                    undo_action(undo)
                    best = max(best, score)
                    alpha = max(alpha, score)
                    if beta <= alpha:
                        break
                if beta <= alpha:
                    break
            return best

        best = math.inf
        for unit in units:
            for action in all_actions(state, unit):
                undo = apply_action(state, unit, action)
                score = self.search(state, depth - 1, True, alpha, beta)
                undo_action(undo)
                best = min(best, score)
                beta = min(beta, score)
                if beta <= alpha:
                    break
            if beta <= alpha:
                break
        return best

    def minimax(self, state: State, depth: int, maximizing: bool) -> float:
        """Plain minimax without pruning, same tree as search()."""
        if depth == 0 or state.is_over():
            return self.evaluate(state)
        side = self.side if maximizing else other_side(self.side)
        pick = max if maximizing else min
        best = -math.inf if maximizing else math.inf
        for unit in state.living(side):
            for action in all_actions(state, unit):
                undo = apply_action(state, unit, action)
                best = pick(best, self.minimax(state, depth - 1, not maximizing))
                undo_action(undo)
        return best

    def choose_action(self, state: State) -> Tuple[Optional[Unit], Optional[Action]]:
        """Best (unit, action) for the maximizer; first found wins ties."""
        self.nodes = 0
        best_unit: Optional[Unit] = None
        best_action: Optional[Action] = None
        best_score = -math.inf

        for unit in state.living(self.side):
            for action in all_actions(state, unit):
                undo = apply_action(state, unit, action)
                score = self.search(state, self.depth, False)
                undo_action(undo)
                if score > best_score:
                    best_score = score
                    best_unit = unit
                    best_action = action

        return best_unit, best_action
