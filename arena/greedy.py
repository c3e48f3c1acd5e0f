"""One-ply heuristic scorer for the BLUE side."""
import math
from typing import Optional, Tuple
from .actions import all_actions
from .model import Action, Attack, Move, Side, State, TileKind, Unit, other_side
from .spatial import cover_at, nearest_distance

ATTACK_POWER_WEIGHT = 3
LETHAL_BONUS = 500
WOUNDED_WEIGHT = 100
CLOSE_IN_WEIGHT = 20
COVER_WEIGHT = 2
POWERUP_BONUS = 100
NOISE = 30.0


class GreedyPolicy:
    """Scores every legal action once and takes the best one.

    A uniform [0, NOISE) draw is added to each action's value, so the
    injected rng decides near-ties. Lethality is judged on raw attack power,
    before cover and crits are applied at execution time.
    """

    def __init__(self, rng, side: Side = "BLUE"):
        self.side = side
        self.rng = rng

    def score_attack(self, state: State, unit: Unit, action: Attack) -> float:
        target = state.find_unit(action.target_id)
        value = (target.max_health - target.health) + unit.attack * ATTACK_POWER_WEIGHT
        if target.health <= unit.attack:
            value += LETHAL_BONUS
        value += (1 - target.health / target.max_health) * WOUNDED_WEIGHT
        return value

    def score_move(self, state: State, unit: Unit, action: Move) -> float:
        value = 0.0
        enemies = state.living(other_side(self.side))
        if enemies:
            before = nearest_distance(unit.pos, enemies)
            after = nearest_distance((action.x, action.z), enemies)
            value = (before - after) * CLOSE_IN_WEIGHT
            value += cover_at(state.grid, action.x, action.z) * COVER_WEIGHT
        if state.grid.kind_at(action.x, action.z) == TileKind.POWERUP:
            value += POWERUP_BONUS
        return value

    def choose_action(self, state: State) -> Tuple[Optional[Unit], Optional[Action]]:
        best_unit: Optional[Unit] = None
        best_action: Optional[Action] = None
        best_value = -math.inf

        for unit in state.living(self.side):
            for action in all_actions(state, unit):
                if isinstance(action, Attack):
                    value = self.score_attack(state, unit, action)
                else:
                    value = self.score_move(state, unit, action)
                value += self.rng.uniform(0, NOISE)

                if value > best_value:
                    best_value = value
                    best_unit = unit
                    best_action = action

        return best_unit, best_action
