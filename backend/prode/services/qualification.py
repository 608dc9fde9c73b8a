"""
Qualification resolver: fill first-round playoff slots from group tables.

A slot side is described by a GroupFinishRule ("2nd of group B"). Rules for
third place name a candidate set ("A/B/C/D"); which group's third-placed team
fills it depends on which groups produced the best third-placed teams, looked
up in a combination table keyed by the sorted group letters ("ABCD").
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from prode.services.group_standings import (
    MatchRecord,
    StandingRow,
    compute_group_standings,
    is_group_complete,
    overall_ranking_key,
)
from prode.services.match_sources import (
    ConfirmedResult,
    Fixture,
    PredictedGuess,
    records_from_results,
    select_group_records,
)

logger = logging.getLogger(__name__)

THIRD_PLACE = 3

# combination key -> {candidate set -> group letter}
ThirdPlaceRules = Mapping[str, Mapping[str, str]]

# Six groups, four best third-placed teams qualify (EURO format).
# Used when a tournament carries no rules of its own.
LEGACY_THIRD_PLACE_RULES: Dict[str, Dict[str, str]] = {
    "ABCD": {"A/D/E/F": "A", "D/E/F": "D", "A/B/C/D": "B", "A/B/C": "C"},
    "ABCE": {"A/D/E/F": "A", "D/E/F": "E", "A/B/C/D": "B", "A/B/C": "C"},
    "ABCF": {"A/D/E/F": "A", "D/E/F": "F", "A/B/C/D": "B", "A/B/C": "C"},
    "ABDE": {"A/D/E/F": "D", "D/E/F": "E", "A/B/C/D": "A", "A/B/C": "B"},
    "ABDF": {"A/D/E/F": "D", "D/E/F": "F", "A/B/C/D": "A", "A/B/C": "B"},
    "ABEF": {"A/D/E/F": "E", "D/E/F": "F", "A/B/C/D": "B", "A/B/C": "A"},
    "ACDE": {"A/D/E/F": "E", "D/E/F": "D", "A/B/C/D": "C", "A/B/C": "A"},
    "ACDF": {"A/D/E/F": "F", "D/E/F": "D", "A/B/C/D": "C", "A/B/C": "A"},
    "ACEF": {"A/D/E/F": "E", "D/E/F": "F", "A/B/C/D": "C", "A/B/C": "A"},
    "ADEF": {"A/D/E/F": "E", "D/E/F": "F", "A/B/C/D": "D", "A/B/C": "A"},
    "BCDE": {"A/D/E/F": "E", "D/E/F": "D", "A/B/C/D": "B", "A/B/C": "C"},
    "BCDF": {"A/D/E/F": "F", "D/E/F": "D", "A/B/C/D": "C", "A/B/C": "B"},
    "BCEF": {"A/D/E/F": "F", "D/E/F": "E", "A/B/C/D": "C", "A/B/C": "B"},
    "BDEF": {"A/D/E/F": "F", "D/E/F": "E", "A/B/C/D": "D", "A/B/C": "B"},
    "CDEF": {"A/D/E/F": "F", "D/E/F": "E", "A/B/C/D": "D", "A/B/C": "C"},
}


@dataclass(frozen=True)
class GroupFinishRule:
    group: str  # group letter, or candidate set like "A/B/C/D" for third place
    position: int  # 1-based


@dataclass
class GroupTable:
    group_letter: str
    standings: List[StandingRow]
    complete: bool


@dataclass(frozen=True)
class PlayoffSlot:
    slot_id: str
    home_rule: GroupFinishRule
    away_rule: GroupFinishRule


@dataclass
class ResolvedSlot:
    slot_id: str
    home_team_id: Optional[str]
    away_team_id: Optional[str]


def build_group_table(
    group_letter: str,
    team_ids: Sequence[str],
    matches: Sequence[MatchRecord],
    head_to_head_first: bool = False,
) -> GroupTable:
    matches = list(matches)
    return GroupTable(
        group_letter=group_letter.upper(),
        standings=compute_group_standings(team_ids, matches, head_to_head_first),
        complete=is_group_complete(matches),
    )


def build_group_table_from_sources(
    group_letter: str,
    team_ids: Sequence[str],
    fixtures: Sequence[Fixture],
    results: Iterable[ConfirmedResult],
    guesses: Iterable[PredictedGuess],
    head_to_head_first: bool = False,
) -> GroupTable:
    """
    Group table from complete results, else complete guesses.

    When neither source covers every fixture the table is built from the
    partial results and flagged incomplete, so no positions resolve from it.
    """
    results = list(results)
    records = select_group_records(fixtures, results, guesses)
    if records is None:
        logger.debug("Group %s has neither complete results nor complete guesses", group_letter)
        return GroupTable(
            group_letter=group_letter.upper(),
            standings=compute_group_standings(
                team_ids, records_from_results(fixtures, results), head_to_head_first
            ),
            complete=False,
        )
    return build_group_table(group_letter, team_ids, records, head_to_head_first)


def team_at_position(table: Optional[GroupTable], position: int) -> Optional[str]:
    """Team id holding a 1-based position, or None while the group is open."""
    if table is None or not table.complete:
        return None
    if position < 1 or position > len(table.standings):
        return None
    return table.standings[position - 1].team_id


def rank_third_placed_teams(tables: Sequence[GroupTable]) -> List[Tuple[str, StandingRow]]:
    """
    Third-placed rows of complete groups, best first.

    Compared on the whole-table key (points, goal difference, goals for);
    equal rows are ordered by group letter.
    """
    thirds = [
        (t.group_letter, t.standings[THIRD_PLACE - 1])
        for t in sorted(tables, key=lambda t: t.group_letter)
        if t.complete and len(t.standings) >= THIRD_PLACE
    ]
    # Stable sort keeps letter order among equal keys
    thirds.sort(key=lambda pair: overall_ranking_key(pair[1]), reverse=True)
    return thirds


def third_place_combination_key(tables: Sequence[GroupTable], slots_needed: int) -> Optional[str]:
    """
    Sorted group letters of the best `slots_needed` third-placed teams.
    None until every group is complete.
    """
    if slots_needed <= 0:
        return None
    thirds = rank_third_placed_teams(tables)
    if len(thirds) != len(tables):
        return None
    letters = sorted(letter for letter, _ in thirds[:slots_needed])
    return "".join(letters)


def resolve_playoff_slots(
    tables: Sequence[GroupTable],
    slots: Sequence[PlayoffSlot],
    third_place_rules: Optional[ThirdPlaceRules] = None,
) -> List[ResolvedSlot]:
    """
    Resolve both sides of every slot to a team id (None when not yet known).

    Third-place sides go through the combination table: `third_place_rules`
    when given and non-empty, LEGACY_THIRD_PLACE_RULES otherwise.
    """
    by_letter = {t.group_letter: t for t in tables}
    third_rules = [
        rule
        for slot in slots
        for rule in (slot.home_rule, slot.away_rule)
        if rule.position == THIRD_PLACE
    ]

    third_place_map: Mapping[str, str] = {}
    if third_rules:
        key = third_place_combination_key(tables, len(third_rules))
        if key is not None:
            rules = third_place_rules if third_place_rules else LEGACY_THIRD_PLACE_RULES
            third_place_map = rules.get(key, {})
            if not third_place_map:
                logger.warning("No third-place assignment for combination %s", key)

    def _resolve(rule: GroupFinishRule) -> Optional[str]:
        letter = rule.group.upper()
        if rule.position == THIRD_PLACE:
            letter = third_place_map.get(letter)
            if letter is None:
                return None
        return team_at_position(by_letter.get(letter), rule.position)

    return [
        ResolvedSlot(
            slot_id=slot.slot_id,
            home_team_id=_resolve(slot.home_rule),
            away_team_id=_resolve(slot.away_rule),
        )
        for slot in slots
    ]
