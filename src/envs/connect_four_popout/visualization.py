"""
Visualization utilities for the popout environment.
"""

import matplotlib.pyplot as plt

_SYMBOLS = {0: '.', 1: '1', 2: '2'}
_COLORS = {1: '#E53935', 2: '#FDD835'}


def render_board(board):
    """
    Text grid with column numbers on top and row numbers on the left.
    The top row is printed first, so row 0 (the bottom) is the last line.
    """
    rows, cols = board.shape
    label_width = len(str(rows - 1))
    lines = [' ' * (label_width + 1) + ' '.join(str(c) for c in range(cols))]
    for r in range(rows - 1, -1, -1):
        cells = ' '.join(_SYMBOLS[int(v)] for v in board[r])
        lines.append(f"{r:>{label_width}} {cells}")
    return '\n'.join(lines)


def display_state(env, state, ax=None, save_path=None, highlight=None):
    """
    Draw the board using matplotlib.

    The origin (0, 0) is the bottom-left cell, matching board indexing.
    `highlight` is an optional iterable of (row, column) cells drawn with a
    thick outline (e.g. the landing cell of the last move).
    Returns the axes; the figure is saved and closed when `save_path` is given.
    """
    board = state.board
    rows, cols = board.shape
    own_figure = ax is None
    if own_figure:
        fig, ax = plt.subplots(figsize=(cols * 0.9 + 1, rows * 0.9 + 1))

    ax.add_patch(plt.Rectangle((-0.5, -0.5), cols, rows, color='#1E4FA3', zorder=0))
    highlight = set(highlight or ())
    for r in range(rows):
        for c in range(cols):
            value = int(board[r, c])
            face = _COLORS.get(value, 'white')
            edge = 'black' if (r, c) in highlight else '#0D2C66'
            width = 3.0 if (r, c) in highlight else 1.0
            ax.add_patch(plt.Circle((c, r), 0.4, facecolor=face, edgecolor=edge, linewidth=width, zorder=1))

    ax.set_xlim(-0.5, cols - 0.5)
    ax.set_ylim(-0.5, rows - 0.5)
    ax.set_xticks(range(cols))
    ax.set_yticks(range(rows))
    ax.set_aspect('equal')
    ax.set_title(f"{state.current_player} to move")

    if save_path is not None:
        ax.figure.savefig(save_path, bbox_inches='tight', dpi=100)
        if own_figure:
            plt.close(ax.figure)
    return ax


__all__ = ['render_board', 'display_state']
