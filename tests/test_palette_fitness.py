"""
Tests for the default palette fitness function.
"""
import pytest

from palette_fitness import PALETTE_ROLES, SOLUTION_LENGTH, evaluate_solution, split_roles


ANCHOR = (51, 102, 204)

# accent, background, surface, button text, main text
READABLE = [90, 140, 230, 255, 255, 255, 242, 244, 248, 255, 255, 255, 20, 20, 30]
MUDDY = [128] * SOLUTION_LENGTH


def test_split_roles_orders_triples():
    roles = split_roles(list(range(15)))
    assert list(roles) == list(PALETTE_ROLES)
    assert list(roles['accent']) == [0, 1, 2]
    assert list(roles['main_text']) == [12, 13, 14]


def test_split_roles_rejects_wrong_length():
    with pytest.raises(ValueError):
        split_roles([0] * 14)


def test_readable_palette_beats_uniform_gray():
    assert evaluate_solution(ANCHOR, READABLE) > evaluate_solution(ANCHOR, MUDDY)


def test_score_is_deterministic_and_pure():
    solution = list(READABLE)
    first = evaluate_solution(ANCHOR, solution)
    assert evaluate_solution(ANCHOR, solution) == first
    assert solution == READABLE
    assert isinstance(first, float)


def test_score_depends_on_anchor():
    assert evaluate_solution((255, 0, 0), READABLE) != evaluate_solution(ANCHOR, READABLE)
