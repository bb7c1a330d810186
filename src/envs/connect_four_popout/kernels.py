"""
Numba kernels for the popout board.

Boards are int8 arrays of shape (height, width) indexed [row, column] with
row 0 at the bottom. Cell values: 0 empty, 1 player 1, 2 player 2.
`heights[c]` is the number of discs in column c.
"""

import numpy as np
from numba import njit

EMPTY = 0
CONNECT = 4

# Scan directions (d_row, d_col): horizontal, vertical, diagonal up, diagonal down
_DR = (0, 1, 1, -1)
_DC = (1, 0, 1, 1)


@njit(cache=True, nogil=True)
def line_owners_nb(board, connect):
    """
    Scan the whole board for runs of `connect` same-coloured discs.

    Returns a uint8 array of length 3 where owners[p] == 1 iff player p
    owns at least one such run. Slot 0 is unused.
    """
    rows, cols = board.shape
    owners = np.zeros(3, np.uint8)
    for r in range(rows):
        for c in range(cols):
            p = board[r, c]
            if p == EMPTY or owners[p] == 1:
                continue
            for k in range(4):
                dr = _DR[k]
                dc = _DC[k]
                end_r = r + dr * (connect - 1)
                end_c = c + dc * (connect - 1)
                if end_r < 0 or end_r >= rows or end_c >= cols:
                    continue
                run = 1
                while run < connect and board[r + dr * run, c + dc * run] == p:
                    run += 1
                if run == connect:
                    owners[p] = 1
                    break
        if owners[1] == 1 and owners[2] == 1:
            break
    return owners


@njit(cache=True, nogil=True)
def legal_masks_nb(board, heights, piece):
    """Return (insert_mask, pop_mask) as uint8 arrays over columns for the side `piece`."""
    rows, cols = board.shape
    insert_mask = np.zeros(cols, np.uint8)
    pop_mask = np.zeros(cols, np.uint8)
    for c in range(cols):
        if heights[c] < rows:
            insert_mask[c] = 1
        if heights[c] > 0 and board[0, c] == piece:
            pop_mask[c] = 1
    return insert_mask, pop_mask


@njit(cache=True, nogil=True)
def drop_disc_nb(board, heights, column, piece):
    """Place `piece` on top of `column` in place. Caller checks the column is not full."""
    row = heights[column]
    board[row, column] = piece
    heights[column] = row + 1
    return row


@njit(cache=True, nogil=True)
def pop_disc_nb(board, heights, column):
    """Remove the bottom disc of `column` in place and let the rest fall one row."""
    top = heights[column] - 1
    for r in range(top):
        board[r, column] = board[r + 1, column]
    board[top, column] = EMPTY
    heights[column] = top


@njit(cache=True, nogil=True)
def column_heights_nb(board):
    """
    Count discs per column, returning -1 for a column with a gap below a disc.
    """
    rows, cols = board.shape
    heights = np.zeros(cols, np.int64)
    for c in range(cols):
        h = 0
        while h < rows and board[h, c] != EMPTY:
            h += 1
        for r in range(h, rows):
            if board[r, c] != EMPTY:
                h = -1
                break
        heights[c] = h
    return heights
