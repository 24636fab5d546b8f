"""Static board topology: positions, adjacency and the sixteen mills.

Positions are numbered row by row over the three nested squares::

    0 ----------- 1 ----------- 2
    |             |             |
    |    3 ------ 4 ------ 5    |
    |    |        |        |    |
    |    |    6 - 7 - 8    |    |
    |    |    |       |    |    |
    9 -- 10 - 11      12 - 13 - 14
    |    |    |       |    |    |
    |    |   15 - 16 - 17  |    |
    |    |        |        |    |
    |   18 ----- 19 ----- 20    |
    |             |             |
    21 ---------- 22 ---------- 23
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Sequence, Tuple

import numpy as np

NUM_POSITIONS = 24

Mill = Tuple[int, int, int]

MILLS: Tuple[Mill, ...] = (
    # horizontal
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (9, 10, 11),
    (12, 13, 14),
    (15, 16, 17),
    (18, 19, 20),
    (21, 22, 23),
    # vertical
    (0, 9, 21),
    (3, 10, 18),
    (6, 11, 15),
    (1, 4, 7),
    (16, 19, 22),
    (8, 12, 17),
    (5, 13, 20),
    (2, 14, 23),
)

_EDGES: Tuple[Tuple[int, int], ...] = tuple(
    (mill[i], mill[i + 1]) for mill in MILLS for i in range(2)
)


def _build_adjacency(edges: Iterable[Tuple[int, int]]) -> Mapping[int, FrozenSet[int]]:
    neighbours: Dict[int, set] = {pos: set() for pos in range(NUM_POSITIONS)}
    for a, b in edges:
        neighbours[a].add(b)
        neighbours[b].add(a)
    return MappingProxyType({pos: frozenset(adj) for pos, adj in neighbours.items()})


ADJACENCY: Mapping[int, FrozenSet[int]] = _build_adjacency(_EDGES)

MILLS_BY_POSITION: Mapping[int, Tuple[Mill, ...]] = MappingProxyType(
    {pos: tuple(mill for mill in MILLS if pos in mill) for pos in range(NUM_POSITIONS)}
)

# Dense views used by the vectorised evaluator.
MILL_INDEX = np.array(MILLS, dtype=np.intp)  # shape (16, 3)
ADJACENCY_MATRIX = np.zeros((NUM_POSITIONS, NUM_POSITIONS), dtype=bool)
for _pos, _adj in ADJACENCY.items():
    ADJACENCY_MATRIX[_pos, list(_adj)] = True
ADJACENCY_MATRIX.setflags(write=False)
MILL_INDEX.setflags(write=False)

CROSS_POINTS: FrozenSet[int] = frozenset(pos for pos, adj in ADJACENCY.items() if len(adj) == 4)
CORNERS: FrozenSet[int] = frozenset(pos for pos, adj in ADJACENCY.items() if len(adj) == 2)
EDGE_MIDPOINTS: FrozenSet[int] = frozenset(pos for pos, adj in ADJACENCY.items() if len(adj) == 3)


def is_valid_position(position: object) -> bool:
    return (
        isinstance(position, (int, np.integer))
        and not isinstance(position, bool)
        and 0 <= int(position) < NUM_POSITIONS
    )


def are_adjacent(a: int, b: int) -> bool:
    return b in ADJACENCY[a]


def render_board(cells: Sequence[int], symbols: Mapping[int, str]) -> str:
    """Draw the board as ASCII art with one symbol per position."""
    s = [symbols[int(cell)] for cell in cells]
    lines = [
        f"{s[0]}-----------{s[1]}-----------{s[2]}",
        "|           |           |",
        f"|   {s[3]}-------{s[4]}-------{s[5]}   |",
        "|   |       |       |   |",
        f"|   |   {s[6]}---{s[7]}---{s[8]}   |   |",
        "|   |   |       |   |   |",
        f"{s[9]}---{s[10]}---{s[11]}       {s[12]}---{s[13]}---{s[14]}",
        "|   |   |       |   |   |",
        f"|   |   {s[15]}---{s[16]}---{s[17]}   |   |",
        "|   |       |       |   |",
        f"|   {s[18]}-------{s[19]}-------{s[20]}   |",
        "|           |           |",
        f"{s[21]}-----------{s[22]}-----------{s[23]}",
    ]
    return "\n".join(lines)
