"""Turn-based battle rules.

Every function here mutates a :class:`BattleState` in memory and nothing
else; loading and persisting the state is the session service's job.

The only transition that ends a battle is a defender losing its last life
inside :func:`apply_attack`.  Once ``winner_id`` is set both attack and
retreat are no-ops.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

from circlebattle.domain.damage import calculate_damage
from circlebattle.domain.models import BattleID, BattleState, Card, CircleID, Player, PlayerID
from circlebattle.domain.rules_config import DEFAULT_RULES, RulesConfig
from circlebattle.errors import FailedPreconditionError, InvalidArgumentError


@dataclass(slots=True)
class AttackResult:
    """What happened during one attack."""

    attacker_id: PlayerID
    defender_id: PlayerID
    damage: int
    knocked_out: bool
    battle_over: bool


def new_player(
    circle_id: CircleID,
    circle_name: str,
    deck: Sequence[Card],
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> Player:
    """Seat a circle in a battle; the circle id doubles as the player id."""

    return Player(
        player_id=PlayerID(circle_id),
        circle_id=circle_id,
        circle_name=circle_name,
        hp=rules.match.starting_lives,
        deck=list(deck),
    )


def new_battle_state(
    battle_id: BattleID,
    player_me: Player,
    player_opponent: Player,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> BattleState:
    """Create the opening state; the initiating side moves first."""

    return BattleState(
        battle_id=battle_id,
        player_me=player_me,
        player_opponent=player_opponent,
        current_turn=rules.match.first_turn,
        current_player_id=player_me.player_id,
        winner_id="",
        logs=[rules.match.opening_log],
    )


def _acting_sides(state: BattleState, player_id: str) -> tuple[Player, Player]:
    if player_id != state.current_player_id:
        raise FailedPreconditionError(
            f"not your turn (current: {state.current_player_id}, you: {player_id})"
        )
    player = state.player(player_id)
    if player is None:
        raise InvalidArgumentError(f"player not in battle: {player_id}")
    return player, state.opponent_of(player)


def _pass_turn(state: BattleState, to_player: Player) -> None:
    state.current_player_id = to_player.player_id
    state.current_turn += 1
    state.add_log(f"Turn Change: {to_player.circle_name}'s Turn")


def apply_attack(
    state: BattleState,
    player_id: str,
    *,
    rng: random.Random | None = None,
    switch_turn: bool = True,
    rules: RulesConfig = DEFAULT_RULES,
) -> AttackResult | None:
    """Let ``player_id``'s active card hit the opponent's active card.

    Args:
        state: Battle to mutate
        player_id: Player taking the action; must hold the turn
        rng: Generator for the damage roll (fresh per call when omitted)
        switch_turn: Pass the turn to the defender afterwards. Disabling it
            lets one side attack repeatedly, which is only useful in tests.
        rules: Rule constants to apply

    Returns:
        AttackResult, or None when nothing happened because the battle is
        already over or a deck is empty

    Raises:
        FailedPreconditionError: If it is not ``player_id``'s turn
        InvalidArgumentError: If ``player_id`` is not part of the battle
    """
    if state.is_finished:
        return None

    attacker, defender = _acting_sides(state, player_id)
    attacker_card = attacker.active_card
    defender_card = defender.active_card
    if attacker_card is None or defender_card is None:
        return None

    damage = calculate_damage(attacker_card, rng=rng, rules=rules)
    defender_card.current_hp = max(0, defender_card.current_hp - damage)
    state.add_log(
        f"{attacker.circle_name} attacked! Deal {damage} damage to {defender.circle_name}."
    )

    knocked_out = defender_card.is_knocked_out
    if knocked_out:
        state.add_log(f"{defender.circle_name}'s card KO!")
        defender.hp -= 1
        if len(defender.deck) > 1:
            defender.deck.pop(0)
        else:
            defender.hp = 0

    if defender.hp <= 0:
        defender.hp = 0
        state.winner_id = attacker.player_id
        state.add_log(f"{attacker.circle_name} Wins!")
        return AttackResult(
            attacker_id=attacker.player_id,
            defender_id=defender.player_id,
            damage=damage,
            knocked_out=knocked_out,
            battle_over=True,
        )

    if switch_turn:
        _pass_turn(state, defender)

    return AttackResult(
        attacker_id=attacker.player_id,
        defender_id=defender.player_id,
        damage=damage,
        knocked_out=knocked_out,
        battle_over=False,
    )


def apply_retreat(state: BattleState, player_id: str, bench_index: int) -> bool:
    """Swap the active card with a bench card and pass the turn.

    ``bench_index`` counts from zero over the bench, i.e. deck positions
    ``1..len(deck) - 1``.

    Returns:
        True if the retreat happened, False if the battle is already over

    Raises:
        FailedPreconditionError: If it is not ``player_id``'s turn
        InvalidArgumentError: If the player is unknown or the index is out of range
    """
    if state.is_finished:
        return False

    player, opponent = _acting_sides(state, player_id)
    index = bench_index + 1
    if index < 1 or index >= len(player.deck):
        raise InvalidArgumentError(
            f"invalid bench index {bench_index} (bench size {len(player.deck) - 1})"
        )

    deck = player.deck
    deck[0], deck[index] = deck[index], deck[0]
    state.add_log(f"{player.circle_name} Retreated!")
    _pass_turn(state, opponent)
    return True
