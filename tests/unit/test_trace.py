"""Unit tests for the debug trace recorder."""
import json
import os
import sys
import pytest

# Ensure src is importable
ROOT = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
sys.path.append(ROOT)

from src.algos.mcts import DebugTrace, DebugTraceRecorder, tree_snapshot
from src.algos.mcts.tree import ROOT as ROOT_HANDLE, SearchTree
from src.envs import Move, Player, TerminalStatus


def add(tree, parent, move):
    return tree.add_child(parent, move, None, [], TerminalStatus.NOT_TERMINAL, Player.PLAYER1)


@pytest.fixture
def recorded():
    """Three iterations of a hand-driven tree, recorded after each one."""
    tree = SearchTree()
    tree.add_root(None, [], TerminalStatus.NOT_TERMINAL, Player.PLAYER2)
    recorder = DebugTraceRecorder()

    a = add(tree, ROOT_HANDLE, Move.insert(2))
    tree.update(a, 1.0)
    tree.update(ROOT_HANDLE, 0.0)
    recorder.record(tree, 1)

    b = add(tree, ROOT_HANDLE, Move.insert(0))
    tree.update(b, 0.5)
    tree.update(ROOT_HANDLE, 0.5)
    recorder.record(tree, 2)

    c = add(tree, a, Move.pop(2))
    tree.update(c, 1.0)
    tree.update(a, 0.0)
    tree.update(ROOT_HANDLE, 1.0)
    recorder.record(tree, 3)

    return tree, recorder.finalize(tree, 3)


class TestDebugTrace:
    """Lazily materialised snapshots."""

    def test_length_and_iterations(self, recorded):
        _, trace = recorded
        assert len(trace) == 3
        assert trace.iteration_numbers() == [1, 2, 3]

    def test_first_snapshot_only_sees_first_child(self, recorded):
        _, trace = recorded
        first = trace[0]
        assert first == {
            'action': None,
            'visit_count': 1,
            'total_reward': 0.0,
            'children': [
                {'action': 'Insert(2)', 'visit_count': 1, 'total_reward': 1.0, 'children': []},
            ],
        }

    def test_children_ordered_by_visits_then_action(self, recorded):
        _, trace = recorded
        second = trace[1]
        assert [c['action'] for c in second['children']] == ['Insert(0)', 'Insert(2)']
        last = trace[-1]
        assert [c['action'] for c in last['children']] == ['Insert(2)', 'Insert(0)']
        assert last['children'][0]['children'][0]['action'] == 'Pop(2)'

    def test_snapshots_are_independent_of_later_updates(self, recorded):
        tree, trace = recorded
        tree.update(ROOT_HANDLE, 1.0)
        assert trace[-1]['visit_count'] == 3

    def test_finalize_does_not_duplicate_last_frame(self, recorded):
        _, trace = recorded
        assert trace.iteration_numbers().count(3) == 1

    def test_finalize_adds_last_iteration(self):
        tree = SearchTree()
        tree.add_root(None, [], TerminalStatus.NOT_TERMINAL, Player.PLAYER2)
        recorder = DebugTraceRecorder(sample_rate=4)
        for iteration in range(1, 7):
            tree.update(ROOT_HANDLE, 0.5)
            recorder.record(tree, iteration)
        trace = recorder.finalize(tree, 6)
        assert trace.iteration_numbers() == [4, 6]

    def test_to_json(self, recorded):
        _, trace = recorded
        data = json.loads(trace.to_json())
        assert [d['iteration'] for d in data] == [1, 2, 3]
        assert data[2]['tree'] == trace[2]

    def test_dump(self, recorded, tmp_path):
        _, trace = recorded
        paths = trace.dump(str(tmp_path))
        assert len(paths) == 3
        with open(paths[0], encoding='utf-8') as f:
            assert json.load(f) == trace[0]

    def test_empty(self):
        trace = DebugTrace.empty()
        assert len(trace) == 0
        assert trace.to_json() == "[]"

    def test_tree_snapshot(self, recorded):
        tree, trace = recorded
        assert tree_snapshot(tree) == trace[-1]

    def test_invalid_sample_rate(self):
        with pytest.raises(ValueError):
            DebugTraceRecorder(sample_rate=0)
