import logging
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Tuple
from .combat import CombatResolver
from .greedy import GreedyPolicy
from .model import (
    DOMINATION_MIN_ALIVE, FULL_SQUAD, POINTS, Event, MatchStatus, Side, State, make_unit,
)
from .rng import DRNG
from .search import MinimaxPolicy
from .terrain import generate_map

log = logging.getLogger("engine")

# Starting positions: (unit type, x, z)
RED_START = [("SOLDIER", 0, 0), ("SNIPER", 0, 7), ("HEAVY", 1, 3), ("SCOUT", 1, 5)]
BLUE_START = [("SOLDIER", 7, 0), ("SNIPER", 7, 7), ("HEAVY", 6, 4), ("SCOUT", 6, 2)]


def default_state() -> State:
    """The fixed arena with both four-unit squads in their corners."""
    red = [make_unit(t, "RED", x, z, uid=f"R-{t}-1") for t, x, z in RED_START]
    blue = [make_unit(t, "BLUE", x, z, uid=f"B-{t}-1") for t, x, z in BLUE_START]
    return State(grid=generate_map(), red=red, blue=blue)


@dataclass(frozen=True)
class UnitView:
    id: str
    side: str
    unit_type_id: str
    x: int
    z: int
    health: int
    max_health: int


@dataclass(frozen=True)
class Snapshot:
    """Read-only copy of the board for renderers."""
    tiles: Tuple[Tuple[str, ...], ...]
    units: Tuple[UnitView, ...]
    round: int
    turn: int
    current_side: str
    status: str
    winner: Optional[str]
    scores: Dict[str, int]
    stats: Dict[str, int]

    def to_dict(self) -> Dict:
        d = asdict(self)
        d["tiles"] = [list(col) for col in self.tiles]
        return d


class Engine:
    """Turn orchestrator: alternates RED (minimax) and BLUE (greedy) decisions."""

    def __init__(self, seed: int, initial_state: Optional[State] = None,
                 red_policy=None, blue_policy=None, rng=None):
        self.state = initial_state if initial_state is not None else default_state()
        self._rng = rng if rng is not None else DRNG(seed)
        self._resolver = CombatResolver(self._rng)
        self._policies = {
            "RED": red_policy if red_policy is not None else MinimaxPolicy("RED"),
            "BLUE": blue_policy if blue_policy is not None else GreedyPolicy(self._rng, "BLUE"),
        }

    # Status machine: IDLE -> RUNNING -> (PAUSED <-> RUNNING) -> GAME_OVER

    def start(self) -> None:
        if self.state.status == MatchStatus.IDLE:
            self.state.status = MatchStatus.RUNNING
            log.info(f"Battle {self.state.battle_id} started: "
                     f"{len(self.state.red)} RED vs {len(self.state.blue)} BLUE")

    def pause(self) -> None:
        if self.state.status == MatchStatus.RUNNING:
            self.state.status = MatchStatus.PAUSED

    def resume(self) -> None:
        if self.state.status == MatchStatus.PAUSED:
            self.state.status = MatchStatus.RUNNING

    @property
    def finished(self) -> bool:
        return self.state.status == MatchStatus.GAME_OVER

    def step(self) -> List[Event]:
        """Play one turn: one decision and its execution for the side to move."""
        s = self.state
        if s.status != MatchStatus.RUNNING:
            return []
        if s.is_over():
            return self._end_game()

        evts: List[Event] = []
        side = s.current_side
        unit, action = self._policies[side].choose_action(s)
        if unit is None or action is None:
            log.info(f"Round {s.round}: {side} has no legal action, turn skipped")
        else:
            log.debug(f"Round {s.round}: {side} {unit.id} -> {action}")
            evts += self._resolver.execute(s, unit, action)

        s.turn += 1
        if side == "RED":
            s.current_side = "BLUE"
        else:
            s.current_side = "RED"
            s.round += 1
            evts.append(Event("RoundAdvanced", s.turn, {"round": s.round}))
        return evts

    def run(self, max_turns: int = 1000) -> List[Event]:
        """Step until the match ends or max_turns turns have been played."""
        self.start()
        evts: List[Event] = []
        for _ in range(max_turns):
            if self.finished or self.state.status != MatchStatus.RUNNING:
                break
            evts += self.step()
        # game over is detected at the start of the following turn
        if not self.finished and self.state.status == MatchStatus.RUNNING and self.state.is_over():
            evts += self.step()
        return evts

    def _end_game(self) -> List[Event]:
        s = self.state
        red_alive = len(s.living("RED"))
        blue_alive = len(s.living("BLUE"))
        winner: Optional[Side] = None
        if red_alive > 0:
            winner = "RED"
        elif blue_alive > 0:
            winner = "BLUE"
        alive_count = red_alive if winner == "RED" else blue_alive

        evts: List[Event] = []
        if winner is not None:
            evts.append(self._resolver.award(s, winner, POINTS["VICTORY"], "VICTORY!"))
            if alive_count == FULL_SQUAD:
                evts.append(self._resolver.award(s, winner, POINTS["FLAWLESS"], "FLAWLESS!"))
            if alive_count >= DOMINATION_MIN_ALIVE:
                evts.append(self._resolver.award(s, winner, POINTS["DOMINATION"], "DOMINATION!"))
        s.winner = winner
        s.status = MatchStatus.GAME_OVER
        evts.append(Event("GameOver", s.turn, {"winner": winner, "alive_count": alive_count}))
        log.info(f"Game over after round {s.round}: "
                 f"{winner or 'draw'} with {alive_count} alive, total {s.scores.total} pts")
        return evts

    def report(self) -> Dict:
        """Reward breakdown for the finished (or current) match."""
        s = self.state
        alive = len(s.living(s.winner)) if s.winner else 0
        return {
            "winner": s.winner,
            "alive_count": alive,
            "initial_count": s.initial_counts.get(s.winner, 0) if s.winner else 0,
            "victory": POINTS["VICTORY"] if s.winner else 0,
            "damage": {"count": s.stats.damage, "points": s.stats.damage * POINTS["DAMAGE"]},
            "eliminations": {"count": s.stats.kills, "points": s.stats.kills * POINTS["KILL"]},
            "crits": {"count": s.stats.crits, "points": s.stats.crits * POINTS["CRITICAL"]},
            "powerups": {"count": s.stats.powerups, "points": s.stats.powerups * POINTS["POWERUP"]},
            "flawless": POINTS["FLAWLESS"] if s.winner and alive == FULL_SQUAD else 0,
            "domination": POINTS["DOMINATION"] if s.winner and alive >= DOMINATION_MIN_ALIVE else 0,
            "scores": asdict(s.scores),
        }

    def snapshot(self) -> Snapshot:
        """Return a read-only view of the current state."""
        s = self.state
        units = tuple(
            UnitView(u.id, u.side, u.unit_type_id, u.x, u.z, u.health, u.max_health)
            for u in s.all_units() if u.alive
        )
        return Snapshot(
            tiles=s.grid.kinds(),
            units=units,
            round=s.round,
            turn=s.turn,
            current_side=s.current_side,
            status=s.status.value,
            winner=s.winner,
            scores=asdict(s.scores),
            stats=asdict(s.stats),
        )

    def check_invariants(self) -> None:
        """Assert board consistency. Violations are bugs, not game states."""
        s = self.state
        seen = set()
        for u in s.all_units():
            assert u.alive, f"dead unit {u.id} still on roster"
            assert s.grid.in_bounds(u.x, u.z), f"{u.id} off the board at {u.pos}"
            assert s.grid.props_at(u.x, u.z).passable, f"{u.id} inside an obstacle at {u.pos}"
            assert u.pos not in seen, f"two units share {u.pos}"
            assert u.health <= u.max_health, f"{u.id} health above max"
            seen.add(u.pos)
