"""Tests for deterministic card stat generation."""

from hypothesis import given
from hypothesis import strategies as st

from circlebattle.domain import models as dm
from circlebattle.domain.rules_config import DEFAULT_RULES
from circlebattle.domain.stats import (
    generate_battle_stats,
    generate_mock_cards,
    with_battle_stats,
)

card_ids = st.text(min_size=1, max_size=40)
grades = st.integers(min_value=1, max_value=4)


@given(card_ids, grades)
def test_stats_are_deterministic(card_id, grade):
    assert generate_battle_stats(card_id, grade) == generate_battle_stats(card_id, grade)


@given(card_ids, grades)
def test_stats_within_grade_bounds(card_id, grade):
    rules = DEFAULT_RULES.stats
    stats = generate_battle_stats(card_id, grade)

    hp_floor = rules.base_hp + grade * rules.hp_per_grade
    attack_floor = rules.base_attack + grade * rules.attack_per_grade
    assert hp_floor <= stats.max_hp < hp_floor + rules.hp_variance
    assert attack_floor <= stats.attack < attack_floor + rules.attack_variance
    assert stats.flavor == rules.flavor


def test_grade_one_ranges():
    stats = generate_battle_stats("member-1", 1)
    assert 550 <= stats.max_hp <= 649
    assert 120 <= stats.attack <= 169


def test_distinct_ids_usually_differ():
    generated = {generate_battle_stats(f"member-{i}", 2) for i in range(20)}
    assert len(generated) > 1


def test_with_battle_stats_fills_card_and_copies():
    card = dm.Card(id=dm.CardID("member-7"), name="Seven", grade=3)
    filled = with_battle_stats(card)

    stats = generate_battle_stats("member-7", 3)
    assert filled.max_hp == stats.max_hp
    assert filled.attack == stats.attack
    assert filled.current_hp == stats.max_hp
    assert filled is not card
    assert card.max_hp == 0


def test_mock_cards_are_grade_one_with_stats():
    cards = generate_mock_cards("circle-x", 5)

    assert [card.id for card in cards] == [f"circle-x-card-{i}" for i in range(5)]
    assert [card.name for card in cards] == [f"Card {i}" for i in range(5)]
    assert all(card.grade == 1 for card in cards)
    assert all(card.current_hp == card.max_hp > 0 for card in cards)
