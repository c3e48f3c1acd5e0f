"""Test the greedy one-ply scorer."""
import pytest
from arena.actions import all_actions
from arena.greedy import GreedyPolicy
from arena.model import Attack, Move, State, TileKind, make_unit
from arena.terrain import empty_map


class FixedNoise:
    """Stands in for DRNG: constant noise, counts draws."""

    def __init__(self, value: float = 0.0):
        self.value = value
        self.draws = 0

    def uniform(self, a: float, b: float) -> float:
        self.draws += 1
        return self.value

    def bernoulli(self, p: float) -> bool:
        return False


def test_attack_score_formula():
    blue = make_unit("SOLDIER", "BLUE", 0, 0, uid="B1")
    red = make_unit("SOLDIER", "RED", 1, 0, uid="R1")
    red.health = 40
    state = State(grid=empty_map(), red=[red], blue=[blue])
    # (100 - 40) + 25 * 3 + (1 - 0.4) * 100
    assert GreedyPolicy(FixedNoise()).score_attack(state, blue, Attack("R1")) == pytest.approx(195.0)


def test_lethal_bonus_ignores_cover():
    """Target sits next to a wall; the real hit would only deal 5."""
    grid = empty_map()
    grid.set_kind(2, 0, TileKind.WALL)
    blue = make_unit("SOLDIER", "BLUE", 0, 0, uid="B1")
    red = make_unit("SOLDIER", "RED", 1, 0, uid="R1")
    red.health = 25
    state = State(grid=grid, red=[red], blue=[blue])
    assert GreedyPolicy(FixedNoise()).score_attack(state, blue, Attack("R1")) == pytest.approx(75 + 75 + 500 + 75)


def test_move_score_rewards_closing_in():
    blue = make_unit("SOLDIER", "BLUE", 4, 4, uid="B1")
    red = make_unit("SOLDIER", "RED", 7, 4, uid="R1")
    state = State(grid=empty_map(), red=[red], blue=[blue])
    policy = GreedyPolicy(FixedNoise())
    assert policy.score_move(state, blue, Move(5, 4)) == 20
    assert policy.score_move(state, blue, Move(3, 4)) == -20
    assert policy.score_move(state, blue, Move(4, 5)) == 0


def test_move_score_cover_and_powerup():
    grid = empty_map()
    grid.set_kind(2, 5, TileKind.CRATE)
    grid.set_kind(3, 4, TileKind.POWERUP)
    blue = make_unit("SOLDIER", "BLUE", 4, 4, uid="B1")
    red = make_unit("SOLDIER", "RED", 7, 4, uid="R1")
    state = State(grid=grid, red=[red], blue=[blue])
    policy = GreedyPolicy(FixedNoise())
    # (3 - 4) * 20 + 0 cover + 100 powerup
    assert policy.score_move(state, blue, Move(3, 4)) == 80
    # (3 - 4) * 20 + crate at (2,5) * 2
    assert policy.score_move(state, blue, Move(3, 5)) == -20 + 40


def test_powerup_counts_without_enemies():
    grid = empty_map()
    grid.set_kind(5, 5, TileKind.POWERUP)
    blue = make_unit("SOLDIER", "BLUE", 4, 4, uid="B1")
    state = State(grid=grid, red=[], blue=[blue])
    policy = GreedyPolicy(FixedNoise())
    assert policy.score_move(state, blue, Move(5, 5)) == 100
    assert policy.choose_action(state) == (blue, Move(5, 5))


def test_prefers_the_killing_blow():
    blue = make_unit("SOLDIER", "BLUE", 0, 0, uid="B1")
    red = make_unit("SOLDIER", "RED", 1, 0, uid="R1")
    red.health = 20
    state = State(grid=empty_map(), red=[red], blue=[blue])
    assert GreedyPolicy(FixedNoise()).choose_action(state) == (blue, Attack("R1"))


def test_first_seen_wins_exact_ties():
    blue = make_unit("SOLDIER", "BLUE", 4, 4, uid="B1")
    state = State(grid=empty_map(), red=[], blue=[blue])
    assert GreedyPolicy(FixedNoise(7.0)).choose_action(state) == (blue, Move(3, 3))


def test_one_noise_draw_per_action():
    blue = [make_unit("SOLDIER", "BLUE", 4, 4, uid="B1"), make_unit("SCOUT", "BLUE", 6, 6, uid="B2")]
    red = [make_unit("HEAVY", "RED", 0, 0, uid="R1")]
    state = State(grid=empty_map(), red=red, blue=blue)
    rng = FixedNoise()
    GreedyPolicy(rng).choose_action(state)
    assert rng.draws == sum(len(all_actions(state, u)) for u in blue)


def test_noise_can_flip_a_close_call():
    class Sequence(FixedNoise):
        def __init__(self, values):
            super().__init__()
            self.values = list(values)

        def uniform(self, a, b):
            self.draws += 1
            return self.values.pop(0) if self.values else 0.0

    blue = make_unit("SOLDIER", "BLUE", 0, 0, uid="B1")
    state = State(grid=empty_map(), red=[], blue=[blue])
    # moves in order: (0,1), (1,0), (1,1) all score 0 before noise
    assert GreedyPolicy(Sequence([1.0, 29.0, 5.0])).choose_action(state) == (blue, Move(1, 0))


def test_no_actions_returns_nothing():
    grid = empty_map()
    for x, z in [(1, 0), (0, 1), (1, 1)]:
        grid.set_kind(x, z, TileKind.WALL)
    blue = make_unit("HEAVY", "BLUE", 0, 0, uid="B1")
    red = make_unit("SOLDIER", "RED", 7, 7, uid="R1")
    state = State(grid=grid, red=[red], blue=[blue])
    assert GreedyPolicy(FixedNoise()).choose_action(state) == (None, None)
    assert GreedyPolicy(FixedNoise()).choose_action(State(grid=empty_map(), red=[red], blue=[])) == (None, None)
