"""Unit tests for rollouts."""
import os
import sys
import numpy as np
import pytest

# Ensure src is importable
ROOT = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
sys.path.append(ROOT)

from src.algos.mcts.simulation import rollout_many, simulate
from src.envs import BaseGame, ConnectFourPopout, GameState, Player, TerminalStatus


class StuckGame(BaseGame):
    """A broken game: never terminal but without moves."""

    def legal_actions(self, state):
        return []

    def terminal_status(self, state):
        return TerminalStatus.NOT_TERMINAL

    def current_player(self, state):
        return Player.PLAYER1


@pytest.fixture
def env():
    return ConnectFourPopout(7, 6)


class TestSimulate:
    """Tests for a single playout."""

    def test_terminal_state_returns_its_status(self, env):
        state = GameState.from_rows(["......."] * 5 + ["1111222"], Player.PLAYER2)
        status = simulate(env, state, np.random.default_rng(0), max_depth=10)
        assert status == TerminalStatus.win(Player.PLAYER1)

    def test_depth_cap_is_a_draw(self, env):
        status = simulate(env, env.get_initial_state(), np.random.default_rng(0), max_depth=1)
        assert status == TerminalStatus.DRAW

    def test_playout_reaches_terminal(self, env):
        status = simulate(env, env.get_initial_state(), np.random.default_rng(3), max_depth=10_000)
        assert status.is_terminal

    def test_same_seed_same_outcome(self, env):
        outcomes = [
            simulate(env, env.get_initial_state(), np.random.default_rng(11), max_depth=200)
            for _ in range(2)
        ]
        assert outcomes[0] == outcomes[1]

    def test_greedy_win_takes_immediate_win(self, env):
        rows = ["......."] * 4 + ["22.....", "111...2"]
        state = GameState.from_rows(rows, Player.PLAYER1)
        for seed in range(5):
            status = simulate(env, state, np.random.default_rng(seed), max_depth=200, policy='greedy_win')
            assert status == TerminalStatus.win(Player.PLAYER1)

    def test_no_moves_on_live_state_is_a_defect(self):
        with pytest.raises(RuntimeError):
            simulate(StuckGame(), None, np.random.default_rng(0), max_depth=5)


class TestRolloutMany:
    """Tests for repeated playouts."""

    def test_number_of_outcomes(self, env):
        outcomes = rollout_many(env, env.get_initial_state(), np.random.default_rng(0), 4, 50)
        assert len(outcomes) == 4
        assert all(o.is_terminal for o in outcomes)
