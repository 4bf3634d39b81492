"""Typed domain exceptions for scorekeeping rule violations.

Illegal moves during normal play (acting on a finished match, declaring
victory without qualifying) are rejected as no-ops and never raise. The
exceptions here cover caller bugs and invalid configuration.
"""


class ScoringRuleError(Exception):
    """Base exception for scorekeeping rule violations."""


class UnknownPartnershipError(ScoringRuleError):
    """The acting partnership id does not belong to the match.

    Attributes:
        match_id: The match the action targeted.
        partnership_id: The id that was not found on either side.

    """

    def __init__(self, *, match_id: str, partnership_id: str) -> None:
        self.match_id = match_id
        self.partnership_id = partnership_id
        super().__init__(f"partnership {partnership_id!r} is not part of match {match_id!r}")


class UnsupportedRulesError(ScoringRuleError):
    """Match rules contain values the state machine cannot honor."""
