"""Scorer configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from scorer.logic.settings import MatchRules
from scorer.session.match_store import DEFAULT_MATCHES_DOCUMENT


class ScorerSettings(BaseSettings):
    model_config = {"env_prefix": "GUANDAN_"}

    data_dir: str = Field(default="backend/data", min_length=1)
    log_dir: str | None = "backend/logs"
    matches_document: str = Field(default=DEFAULT_MATCHES_DOCUMENT, min_length=1, pattern=r"^[\w.-]+$")

    double_contribute_steps: int = Field(default=3, ge=1)
    single_contribute_steps: int = Field(default=2, ge=1)

    def to_rules(self) -> MatchRules:
        return MatchRules(
            double_contribute_steps=self.double_contribute_steps,
            single_contribute_steps=self.single_contribute_steps,
        )
