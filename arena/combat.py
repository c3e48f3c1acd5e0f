import logging
import math
from typing import List
from .model import POINTS, Action, Attack, Event, Move, Side, State, TileKind, Unit
from .spatial import cover_bonus

log = logging.getLogger("combat")

MIN_DAMAGE = 5
CRIT_MULTIPLIER = 1.8


def cover_adjusted_damage(attack: int, cover: int) -> int:
    """Cover soaks damage point for point, but never below MIN_DAMAGE."""
    return max(MIN_DAMAGE, attack - cover)


class CombatResolver:
    """Executes a chosen action for real: rolls crits, moves units, awards points."""

    def __init__(self, rng):
        self._rng = rng

    def award(self, state: State, side: Side, amount: int, reason: str) -> Event:
        state.scores.add(side, amount)
        return Event("ScoreAwarded", state.turn, {"side": side, "amount": amount, "reason": reason})

    def execute(self, state: State, unit: Unit, action: Action) -> List[Event]:
        if isinstance(action, Move):
            return self._move(state, unit, action)
        if isinstance(action, Attack):
            return self._attack(state, unit, action)
        return []

    def _move(self, state: State, unit: Unit, action: Move) -> List[Event]:
        evts: List[Event] = []
        grid = state.grid
        from_x, from_z = unit.x, unit.z
        unit.x, unit.z = action.x, action.z
        evts.append(Event("UnitMoved", state.turn,
                          {"unit_id": unit.id, "from_x": from_x, "from_z": from_z,
                           "to_x": action.x, "to_z": action.z}))

        kind = grid.kind_at(action.x, action.z)
        if kind == TileKind.POWERUP:
            evts.append(self.award(state, unit.side, POINTS["POWERUP"], "Power-up!"))
            grid.set_kind(action.x, action.z, TileKind.EMPTY)
            state.stats.powerups += 1
            evts.append(Event("PowerupCollected", state.turn,
                              {"unit_id": unit.id, "x": action.x, "z": action.z}))
            log.debug(f"{unit.id} collected power-up at ({action.x},{action.z})")
        elif kind == TileKind.DOOR:
            evts.append(self.award(state, unit.side, POINTS["DOOR_USE"], "Used door"))
            evts.append(Event("DoorUsed", state.turn,
                              {"unit_id": unit.id, "x": action.x, "z": action.z}))
        return evts

    def _attack(self, state: State, unit: Unit, action: Attack) -> List[Event]:
        evts: List[Event] = []
        target = state.find_unit(action.target_id)
        if target is None or target.health <= 0:
            return evts

        is_crit = self._rng.bernoulli(unit.crit_chance)
        cover = cover_bonus(state.grid, target)
        damage = cover_adjusted_damage(unit.attack, cover)

        score_evts: List[Event] = []
        if is_crit:
            damage = math.floor(damage * CRIT_MULTIPLIER)
            state.stats.crits += 1
            score_evts.append(self.award(state, unit.side, POINTS["CRITICAL"], "CRITICAL HIT!"))

        target.health -= damage
        state.stats.damage += damage
        score_evts.append(self.award(state, unit.side, damage * POINTS["DAMAGE"], "Damage"))

        evts.append(Event("UnitAttacked", state.turn,
                          {"attacker_id": unit.id, "target_id": target.id, "damage": damage,
                           "is_crit": is_crit, "cover": cover, "health": target.health}))
        evts += score_evts
        log.debug(f"{unit.id} -> {target.id}: {damage} dmg{' CRIT' if is_crit else ''}"
                  f"{f' ({cover} cover)' if cover else ''}")

        if target.health <= 0:
            state.stats.kills += 1
            evts.append(self.award(state, unit.side, POINTS["KILL"], "ELIMINATION!"))
            if not state.first_blood:
                state.first_blood = True
                evts.append(self.award(state, unit.side, POINTS["FIRST_BLOOD"], "FIRST BLOOD!"))
                log.info(f"First blood by {unit.side} ({unit.id} on {target.id})")
            roster = state.roster(target.side)
            roster[:] = [u for u in roster if u is not target]
            evts.append(Event("UnitEliminated", state.turn,
                              {"unit_id": target.id, "killer_id": unit.id}))
        return evts
