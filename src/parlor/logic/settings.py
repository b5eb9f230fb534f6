"""Centralized game settings - all configurable round and match rules."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from parlor.logic.exceptions import UnsupportedSettingsError

NUM_PLAYERS = 4
SUPPORTED_HAND_SIZE = 13


class GameSettings(BaseModel):
    """
    Configuration for the round engine and the score ledger.

    Defaults reproduce the classic parlor rules: 5000 starting chips,
    eight rounds, and a 300 chip base payment per win.
    """

    model_config = ConfigDict(frozen=True)

    # --- Match Structure ---
    num_players: int = NUM_PLAYERS
    starting_score: int = 5000
    termination_round: int = 8

    # --- Payments ---
    payment_unit: int = 100
    base_payment: int = 3  # in payment units, before the house streak bonus

    # --- Round ---
    hand_size: int = SUPPORTED_HAND_SIZE
    prompt_human_without_claims: bool = True  # ask the human to continue even with nothing to claim
    check_invariants: bool = True  # verify tile conservation and hand sizes after each step


def validate_settings(settings: GameSettings) -> None:
    """Validate that all settings values are supported by the engine.

    Raises UnsupportedSettingsError listing every unsupported value.
    """
    errors: list[str] = []

    if settings.num_players != NUM_PLAYERS:
        errors.append(f"num_players={settings.num_players} is not supported (only 4-player games)")

    if settings.hand_size != SUPPORTED_HAND_SIZE:
        errors.append(f"hand_size={settings.hand_size} is not supported (hands are always 13 tiles)")

    if settings.termination_round < 1:
        errors.append(f"termination_round={settings.termination_round} must be at least 1")

    if settings.starting_score < 0:
        errors.append(f"starting_score={settings.starting_score} must not be negative")

    if settings.payment_unit <= 0 or settings.base_payment < 0:
        errors.append("payment_unit must be positive and base_payment must not be negative")

    if errors:
        raise UnsupportedSettingsError("; ".join(errors))
