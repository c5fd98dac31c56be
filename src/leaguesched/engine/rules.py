"""Scheduling rules — loaded from config/rules.json.

Usage:
    loader = RulesLoader()          # loads default rules.json
    rules = loader.rules
    loader.reload()                 # pick up edits without restarting
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from leaguesched.engine.fixture_generator import DEFAULT_INTERVAL_DAYS, MAX_SHUFFLE_ATTEMPTS
from leaguesched.models.season import SCHEDULABLE_STATUSES, SeasonStatus

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).parent.parent.parent.parent / "config" / "rules.json"


class ScheduleRules(BaseModel):
    """Tunable knobs for schedule generation."""
    model_config = ConfigDict(extra="ignore")

    max_shuffle_attempts: int = Field(default=MAX_SHUFFLE_ATTEMPTS, ge=1)
    default_rounds: int = Field(default=1, ge=1)
    interval_days: int = Field(default=DEFAULT_INTERVAL_DAYS, ge=0)
    schedulable_statuses: list[SeasonStatus] = Field(
        default_factory=lambda: list(SCHEDULABLE_STATUSES)
    )


class RulesLoader:
    """Holds the current ScheduleRules and re-reads them on demand."""

    def __init__(self, rules_path: str | Path | None = None):
        self.rules_path = Path(rules_path) if rules_path else DEFAULT_RULES_PATH
        self.rules = ScheduleRules()
        self.reload()

    def reload(self) -> ScheduleRules:
        """(Re)load rules from JSON. A missing file means defaults."""
        if self.rules_path.exists():
            with open(self.rules_path) as f:
                data = json.load(f)
            self.rules = ScheduleRules.model_validate(data.get("scheduling", data))
        else:
            logger.debug("No rules file at %s, using defaults", self.rules_path)
            self.rules = ScheduleRules()
        return self.rules


def load_rules(rules_path: str | Path | None = None) -> ScheduleRules:
    return RulesLoader(rules_path).rules
