import numpy as np

from morris.core import ADJACENCY, MILLS, MILLS_BY_POSITION, NUM_POSITIONS, are_adjacent
from morris.core.topology import CORNERS, CROSS_POINTS, EDGE_MIDPOINTS, is_valid_position, render_board


def test_adjacency_is_symmetric_with_two_to_four_neighbours():
    assert set(ADJACENCY) == set(range(NUM_POSITIONS))
    for position, neighbours in ADJACENCY.items():
        assert 2 <= len(neighbours) <= 4
        assert position not in neighbours
        for other in neighbours:
            assert position in ADJACENCY[other]


def test_known_adjacencies():
    assert ADJACENCY[0] == frozenset({1, 9})
    assert ADJACENCY[4] == frozenset({1, 3, 5, 7})
    assert ADJACENCY[19] == frozenset({16, 18, 20, 22})
    assert are_adjacent(10, 18)
    assert not are_adjacent(0, 3)
    assert not are_adjacent(11, 12)


def test_mills_are_straight_adjacent_triples():
    assert len(MILLS) == 16
    assert len(set(MILLS)) == 16
    for a, b, c in MILLS:
        assert are_adjacent(a, b) and are_adjacent(b, c)


def test_every_position_lies_on_two_mills():
    for position in range(NUM_POSITIONS):
        assert len(MILLS_BY_POSITION[position]) == 2


def test_position_classes_partition_the_board():
    assert CROSS_POINTS == frozenset({4, 10, 13, 19})
    assert len(CORNERS) == 12
    assert len(EDGE_MIDPOINTS) == 8
    assert CROSS_POINTS | CORNERS | EDGE_MIDPOINTS == frozenset(range(NUM_POSITIONS))


def test_render_board_places_every_symbol():
    cells = [0] * NUM_POSITIONS
    cells[0] = 1
    cells[23] = 2
    text = render_board(cells, {0: ".", 1: "X", 2: "O"})
    lines = text.splitlines()
    assert lines[0].startswith("X")
    assert lines[-1].endswith("O")
    assert text.count(".") == 22


def test_is_valid_position_rejects_booleans_and_out_of_range():
    assert is_valid_position(0)
    assert is_valid_position(23)
    assert is_valid_position(np.int64(5))
    assert not is_valid_position(True)
    assert not is_valid_position(False)
    assert not is_valid_position(24)
    assert not is_valid_position(-1)
    assert not is_valid_position(1.0)
