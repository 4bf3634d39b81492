"""Centralized match rules for Guandan scorekeeping."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from scorer.logic.exceptions import UnsupportedRulesError


class MatchRules(BaseModel):
    """
    Configurable scoring rules.

    Defaults follow the standard contribution table: a double contribution
    advances the opponents three levels, a single contribution two.
    """

    model_config = ConfigDict(frozen=True)

    double_contribute_steps: int = 3
    single_contribute_steps: int = 2


def validate_rules(rules: MatchRules) -> None:
    """Raise UnsupportedRulesError for rule values the state machine cannot apply."""
    if rules.double_contribute_steps < 1 or rules.single_contribute_steps < 1:
        raise UnsupportedRulesError(
            "contribution steps must be positive, got "
            f"double={rules.double_contribute_steps} single={rules.single_contribute_steps}",
        )
    if rules.single_contribute_steps > rules.double_contribute_steps:
        raise UnsupportedRulesError("a single contribution cannot advance further than a double contribution")
