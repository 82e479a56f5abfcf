"""
Bracket Round Classifier

Maps the time slot of a finals-day match to its knockout round using a
static lookup table, and groups finals-day matches into a bracket view.

With two fields, the finals-day grid is:
  Round of 16   -> first 4 slots (8 matches)
  Quarter-final -> next 2 slots (4 matches)
  Semi-final    -> next slot (2 matches)
  Third place   -> next slot
  Final         -> next slot
"""

import enum
import math
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence

from config import (
    BracketSettings,
    ScheduleSettings,
    BRACKET_SETTINGS,
    SCHEDULE_SETTINGS,
)
from engine.records import MatchRecord
from engine.schedule import generate_time_slots


class BracketRound(enum.Enum):
    """Knockout rounds, in playing order."""
    ROUND_OF_16 = "round_of_16"
    QUARTER_FINAL = "quarter_final"
    SEMI_FINAL = "semi_final"
    THIRD_PLACE = "third_place"
    FINAL = "final"
    OTHER = "other"


def expected_matches(settings: BracketSettings = BRACKET_SETTINGS) -> dict[BracketRound, int]:
    """Expected match count per round, in playing order."""
    return {BracketRound(name): count for name, count in settings.rounds}


def round_slot_counts(
    bracket: BracketSettings = BRACKET_SETTINGS,
    schedule: ScheduleSettings = SCHEDULE_SETTINGS,
) -> list[tuple[BracketRound, int]]:
    """Number of consecutive time slots each round occupies."""
    fields = max(len(schedule.fields), 1)
    return [
        (bracket_round, math.ceil(count / fields))
        for bracket_round, count in expected_matches(bracket).items()
    ]


def build_round_table(
    time_slots: Sequence[str],
    slot_counts: Iterable[tuple[BracketRound, int]],
) -> dict[str, BracketRound]:
    """
    Assign consecutive slot labels to rounds.

    Rounds that do not fit in the grid are left out of the table.
    """
    table: dict[str, BracketRound] = {}
    slots = iter(time_slots)
    for bracket_round, count in slot_counts:
        for _ in range(count):
            label = next(slots, None)
            if label is None:
                return table
            table[label] = bracket_round
    return table


# Slot label -> round, for the default grid
ROUND_BY_TIME_SLOT: dict[str, BracketRound] = build_round_table(
    generate_time_slots(), round_slot_counts()
)


def classify_round(
    time_slot: Optional[str],
    table: Mapping[str, BracketRound] = ROUND_BY_TIME_SLOT,
) -> BracketRound:
    """Round for a time-slot label; unknown labels are OTHER."""
    if time_slot is None:
        return BracketRound.OTHER
    return table.get(time_slot, BracketRound.OTHER)


@dataclass
class BracketView:
    """Finals-day matches grouped by round, with placeholders to render."""
    rounds: dict[BracketRound, list[MatchRecord]] = field(default_factory=dict)
    unfilled: dict[BracketRound, int] = field(default_factory=dict)
    other: list[MatchRecord] = field(default_factory=list)

    @property
    def total_unfilled(self) -> int:
        return sum(self.unfilled.values())


def build_bracket_view(
    matches: Iterable[MatchRecord],
    table: Mapping[str, BracketRound] = ROUND_BY_TIME_SLOT,
    expected: Optional[Mapping[BracketRound, int]] = None,
) -> BracketView:
    """
    Group finals-day matches by round.

    Matches are ordered by time slot, then field. Unfilled counts are
    expected minus scheduled matches, never negative.
    """
    expected = expected if expected is not None else expected_matches()

    view = BracketView(rounds={bracket_round: [] for bracket_round in expected})
    for match in sorted(matches, key=lambda m: (m.time_slot, m.field)):
        bracket_round = classify_round(match.time_slot, table)
        if bracket_round in view.rounds:
            view.rounds[bracket_round].append(match)
        else:
            view.other.append(match)

    view.unfilled = {
        bracket_round: max(count - len(view.rounds[bracket_round]), 0)
        for bracket_round, count in expected.items()
    }
    return view
