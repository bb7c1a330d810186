"""Unit tests for the MCTS search loop."""
import math
import os
import sys
import numpy as np
import pytest

# Ensure src is importable
ROOT = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
sys.path.append(ROOT)

from src.algos.mcts import DEFAULT_ARGS, MCTS, resolve_args
from src.envs import ConnectFourPopout, GameState, Move, Player
from src.errors import SearchOnTerminalState

EMPTY_ROW = "......."

# Player 1 has three on the bottom row; only Insert(3) wins at once.
WIN_IN_ONE = [EMPTY_ROW] * 4 + ["22.....", "111...2"]

# Player 2 threatens Insert(4) on the bottom row; only Insert(4) stops it.
BLOCK_IN_ONE = [EMPTY_ROW] * 4 + [".11....", "1222..."]


@pytest.fixture
def env():
    return ConnectFourPopout(7, 6)


@pytest.fixture
def basic_args():
    """Small, seeded search budget."""
    return {
        'num_searches': 200,
        'C': math.sqrt(2),
        'random_seed': 7,
    }


class TestConfig:
    """Argument defaults and validation."""

    def test_defaults(self):
        args = resolve_args()
        assert args == DEFAULT_ARGS
        assert args is not DEFAULT_ARGS

    def test_override(self):
        args = resolve_args({'num_searches': 10, 'extra_key': 'kept'})
        assert args['num_searches'] == 10
        assert args['extra_key'] == 'kept'
        assert args['C'] == pytest.approx(math.sqrt(2))

    @pytest.mark.parametrize("bad", [
        {'num_searches': 0},
        {'num_searches': 2.5},
        {'C': -1.0},
        {'time_limit': 0},
        {'max_rollout_depth': 0},
        {'playouts_per_simulation': 0},
        {'trace_sample_rate': 0},
        {'rollout_policy': 'heavy'},
    ])
    def test_invalid_args(self, env, bad):
        with pytest.raises(ValueError):
            MCTS(env, args=bad)

    @pytest.mark.parametrize("budget", [3, np.int64(3), np.arange(1, 4)[-1]])
    def test_integer_budgets(self, env, budget):
        mcts = MCTS(env, args={'num_searches': budget, 'random_seed': 0})
        assert mcts.search(env.get_initial_state()).root_visits == 3

    def test_bool_budget_rejected(self, env):
        with pytest.raises(ValueError):
            MCTS(env, args={'num_searches': True})


class TestSearchInvariants:
    """Visit bookkeeping and determinism."""

    def test_root_visits_equal_iterations(self, env, basic_args):
        result = MCTS(env, args=basic_args).search(env.get_initial_state())
        assert result.iterations == 200
        assert result.root_visits == 200
        assert len(result.debug_trace) == 200

    def test_every_iteration_goes_through_one_root_child(self, env, basic_args):
        mcts = MCTS(env, args=basic_args)
        mcts.search(env.get_initial_state())
        assert sum(mcts.action_visits().values()) == 200

    def test_children_never_exceed_parent(self, env, basic_args):
        result = MCTS(env, args=basic_args).search(env.get_initial_state())

        def check(node):
            for child in node['children']:
                assert child['visit_count'] <= node['visit_count']
                check(child)

        for snapshot in result.debug_trace[::25]:
            check(snapshot)

    def test_snapshot_root_visits_track_iterations(self, env, basic_args):
        result = MCTS(env, args=basic_args).search(env.get_initial_state())
        trace = result.debug_trace
        for iteration, snapshot in zip(trace.iteration_numbers(), trace):
            assert snapshot['visit_count'] == iteration

    def test_same_seed_same_trace(self, env, basic_args):
        a = MCTS(env, args=basic_args).search(env.get_initial_state())
        b = MCTS(env, args=basic_args).search(env.get_initial_state())
        assert a.best_move == b.best_move
        assert a.debug_trace.to_json() == b.debug_trace.to_json()

    def test_injected_rng_matches_seed(self, env, basic_args):
        a = MCTS(env, args=basic_args).search(env.get_initial_state())
        unseeded = dict(basic_args, random_seed=None)
        b = MCTS(env, args=unseeded, rng=np.random.default_rng(7)).search(env.get_initial_state())
        assert a.debug_trace.to_json() == b.debug_trace.to_json()

    def test_best_move_is_legal(self, env, basic_args):
        state = env.apply(env.get_initial_state(), Move.insert(3))
        result = MCTS(env, args=basic_args).search(state)
        assert result.best_move in env.legal_actions(state)

    def test_best_action_matches_search(self, env, basic_args):
        state = env.get_initial_state()
        expected = MCTS(env, args=basic_args).search(state).best_move
        assert MCTS(env, args=basic_args).best_action(state) == expected

    def test_multiple_playouts_keep_one_visit_per_iteration(self, env, basic_args):
        args = dict(basic_args, num_searches=50, playouts_per_simulation=4)
        result = MCTS(env, args=args).search(env.get_initial_state())
        assert result.root_visits == 50
        snapshot = result.debug_trace[-1]
        assert 0.0 <= snapshot['total_reward'] <= 50.0

    def test_time_limit_stops_early(self, env, basic_args):
        args = dict(basic_args, num_searches=10_000, time_limit=1e-9)
        result = MCTS(env, args=args).search(env.get_initial_state())
        assert result.iterations == 1
        assert result.root_visits == 1

    def test_progress_bar(self, env, basic_args):
        args = dict(basic_args, num_searches=20, progress_bar=True)
        assert MCTS(env, args=args).search(env.get_initial_state()).root_visits == 20


class TestSearchErrors:
    """Searching finished games."""

    def test_search_on_won_position(self, env, basic_args):
        state = GameState.from_rows([EMPTY_ROW] * 5 + ["1111222"], Player.PLAYER2)
        mcts = MCTS(env, args=basic_args)
        with pytest.raises(SearchOnTerminalState):
            mcts.search(state)
        assert mcts.last_tree is None

    def test_search_on_drawn_position(self, basic_args):
        env = ConnectFourPopout(1, 1)
        state = GameState.from_rows(["2"], Player.PLAYER1)
        with pytest.raises(SearchOnTerminalState):
            MCTS(env, args=basic_args).search(state)


class TestTactics:
    """Positions with a forced answer."""

    def test_takes_immediate_win(self, env):
        state = GameState.from_rows(WIN_IN_ONE, Player.PLAYER1)
        mcts = MCTS(env, args={'num_searches': 1000, 'C': math.sqrt(2), 'random_seed': 0})
        result = mcts.search(state)
        assert result.best_move == Move.insert(3)

        stats = {s['action']: s for s in mcts.last_tree.child_stats()}
        assert stats[Move.insert(3)]['mean_reward'] == 1.0

    def test_takes_immediate_win_with_greedy_rollouts(self, env):
        state = GameState.from_rows(WIN_IN_ONE, Player.PLAYER1)
        args = {'num_searches': 500, 'random_seed': 1, 'rollout_policy': 'greedy_win'}
        assert MCTS(env, args=args).search(state).best_move == Move.insert(3)

    def test_blocks_immediate_loss(self, env):
        state = GameState.from_rows(BLOCK_IN_ONE, Player.PLAYER1)
        args = {'num_searches': 4000, 'C': math.sqrt(2), 'random_seed': 0, 'debug_track_trees': False}
        assert MCTS(env, args=args).search(state).best_move == Move.insert(4)


class TestTreeOutput:
    """Trace switches, dumps and pretty printing."""

    def test_tracking_disabled(self, env, basic_args):
        args = dict(basic_args, debug_track_trees=False)
        result = MCTS(env, args=args).search(env.get_initial_state())
        assert len(result.debug_trace) == 0
        assert result.root_visits == 200

    def test_sample_rate(self, env, basic_args):
        args = dict(basic_args, num_searches=95, trace_sample_rate=10)
        result = MCTS(env, args=args).search(env.get_initial_state())
        assert result.debug_trace.iteration_numbers() == [10, 20, 30, 40, 50, 60, 70, 80, 90, 95]

    def test_tree_dump_dir(self, env, basic_args, tmp_path):
        args = dict(basic_args, num_searches=5, tree_dump_dir=str(tmp_path / "trees"))
        MCTS(env, args=args).search(env.get_initial_state())
        assert len(os.listdir(tmp_path / "trees")) == 5

    def test_tree_dump_without_tracking(self, env, basic_args, tmp_path):
        args = dict(basic_args, num_searches=5, debug_track_trees=False,
                    tree_dump_dir=str(tmp_path / "trees"))
        MCTS(env, args=args).search(env.get_initial_state())
        assert os.listdir(tmp_path / "trees") == ["tree_000005.json"]

    def test_format_tree(self, env, basic_args):
        mcts = MCTS(env, args=basic_args)
        assert mcts.format_tree() == ""
        mcts.search(env.get_initial_state())
        lines = mcts.format_tree(max_depth=1).splitlines()
        assert lines[0].startswith("root: ")
        assert lines[0].endswith("/ 200")
        assert len(lines) == 1 + 7
        assert all(line.startswith("  Insert(") for line in lines[1:])
