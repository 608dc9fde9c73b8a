"""
Group standings: turn round-robin match outcomes into an ordered group table.

Outcome-source agnostic: real results and a user's guesses arrive in the same
MatchRecord shape. Ordering:
  1) Points (desc)
  2) If head_to_head_first: mini-league points, then mini-league goal
     difference, computed only from matches among the tied teams
  3) Overall goal difference (desc)
  4) Overall goals for (desc)
  5) Input team order (stable final breaker)

Disciplinary points and drawing of lots are not modelled; step 5 stands in
for them so callers always get a total order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import groupby
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

POINTS_PER_WIN = 3
POINTS_PER_DRAW = 1
POINTS_PER_LOSS = 0


class StandingsError(Exception):
    """Base exception for standings computation errors"""

    pass


class InvalidMatchOutcome(StandingsError):
    """A match outcome has a negative or non-integer goal count"""

    pass


class DuplicateTeamId(StandingsError):
    """The same team id was passed more than once"""

    pass


@dataclass(frozen=True)
class MatchOutcome:
    home_goals: int
    away_goals: int


@dataclass(frozen=True)
class MatchRecord:
    home_team_id: str
    away_team_id: str
    outcome: Optional[MatchOutcome] = None  # None = not played / not guessed


@dataclass
class StandingRow:
    team_id: str
    games_played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against


# Block of rows still tied on every criterion applied so far
TieBlock = List[StandingRow]


def compute_group_standings(
    team_ids: Sequence[str],
    matches: Iterable[MatchRecord],
    head_to_head_first: bool = False,
) -> List[StandingRow]:
    """
    Compute the ordered standings of one group.

    Args:
        team_ids: Unique team ids; their order is the last-resort tiebreak.
        matches: Match records. Records with no outcome, or naming a team
                 outside team_ids, contribute nothing and are not validated.
        head_to_head_first: Consult the mini-league among tied teams before
                 overall goal statistics.

    Returns:
        One StandingRow per team id, best first (position 1 = index 0).

    Raises:
        InvalidMatchOutcome: a counted outcome has negative or non-integer
                 goals.
        DuplicateTeamId: team_ids contains a repeated id.
    """
    team_ids = list(team_ids)
    matches = list(matches)
    input_order = _index_team_ids(team_ids)
    counted = [m for m in matches if _is_counted(m, input_order)]
    _validate_outcomes(counted)
    rows = _aggregate(team_ids, counted)

    # sorted() is stable, so equal-points rows keep input order
    by_points = sorted(rows.values(), key=lambda r: r.points, reverse=True)

    ordered: List[StandingRow] = []
    for block in _partition(by_points, key=lambda r: r.points):
        if len(block) == 1:
            ordered.extend(block)
        else:
            ordered.extend(_break_tie(block, counted, head_to_head_first))
    return ordered


def is_group_complete(matches: Iterable[MatchRecord]) -> bool:
    """True when every match of the group has an outcome."""
    return all(m.outcome is not None for m in matches)


def overall_ranking_key(row: StandingRow) -> Tuple[int, int, int]:
    """Whole-table comparison key (higher = better). Used across groups."""
    return (row.points, row.goal_difference, row.goals_for)


def team_ids_in_order(rows: Sequence[StandingRow]) -> List[str]:
    return [r.team_id for r in rows]


def _index_team_ids(team_ids: List[str]) -> Dict[str, int]:
    index: Dict[str, int] = {}
    for pos, tid in enumerate(team_ids):
        if tid in index:
            raise DuplicateTeamId(f"Team id {tid!r} appears more than once")
        index[tid] = pos
    return index


def _is_valid_goal_count(value) -> bool:
    # bool is an int subclass but never a goal count
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _validate_outcomes(matches: List[MatchRecord]) -> None:
    for m in matches:
        if m.outcome is None:
            continue
        if not (_is_valid_goal_count(m.outcome.home_goals) and _is_valid_goal_count(m.outcome.away_goals)):
            raise InvalidMatchOutcome(
                f"Invalid score {m.outcome.home_goals!r}-{m.outcome.away_goals!r} "
                f"for {m.home_team_id} vs {m.away_team_id}"
            )


def _is_counted(match: MatchRecord, team_index: Dict[str, int]) -> bool:
    if match.outcome is None:
        return False
    if match.home_team_id not in team_index or match.away_team_id not in team_index:
        logger.debug(
            "Skipping match %s vs %s: references a team outside the group",
            match.home_team_id,
            match.away_team_id,
        )
        return False
    return True


def _aggregate(team_ids: List[str], matches: List[MatchRecord]) -> Dict[str, StandingRow]:
    """Build fresh rows for team_ids from already-filtered matches."""
    rows = {tid: StandingRow(team_id=tid) for tid in team_ids}
    for m in matches:
        home = rows[m.home_team_id]
        away = rows[m.away_team_id]
        hg = m.outcome.home_goals
        ag = m.outcome.away_goals

        home.games_played += 1
        away.games_played += 1
        home.goals_for += hg
        home.goals_against += ag
        away.goals_for += ag
        away.goals_against += hg

        if hg > ag:
            _record_win(home, away)
        elif hg < ag:
            _record_win(away, home)
        else:
            home.draws += 1
            away.draws += 1
            home.points += POINTS_PER_DRAW
            away.points += POINTS_PER_DRAW
    return rows


def _record_win(winner: StandingRow, loser: StandingRow) -> None:
    winner.wins += 1
    winner.points += POINTS_PER_WIN
    loser.losses += 1
    loser.points += POINTS_PER_LOSS


def _partition(rows: List[StandingRow], key: Callable[[StandingRow], object]) -> List[TieBlock]:
    """Split an already-sorted sequence into maximal runs of equal key."""
    return [list(run) for _, run in groupby(rows, key=key)]


def _refine(blocks: List[TieBlock], key: Callable[[StandingRow], object]) -> List[TieBlock]:
    """
    Re-sort every tied block by key (desc) and split it further.
    Already-resolved blocks pass through untouched.
    """
    refined: List[TieBlock] = []
    for block in blocks:
        if len(block) < 2:
            refined.append(block)
            continue
        refined.extend(_partition(sorted(block, key=key, reverse=True), key))
    return refined


def _break_tie(
    block: TieBlock,
    matches: List[MatchRecord],
    head_to_head_first: bool,
) -> List[StandingRow]:
    """Order one block of teams that are level on points."""
    blocks: List[TieBlock] = [block]

    if head_to_head_first:
        mini = _aggregate([r.team_id for r in block], _matches_among(block, matches))
        blocks = _refine(blocks, key=lambda r: mini[r.team_id].points)
        blocks = _refine(blocks, key=lambda r: mini[r.team_id].goal_difference)

    blocks = _refine(blocks, key=lambda r: r.goal_difference)
    blocks = _refine(blocks, key=lambda r: r.goals_for)

    ordered: List[StandingRow] = []
    for residual in blocks:
        if len(residual) > 1:
            logger.debug(
                "Unresolved tie kept in input order: %s",
                [r.team_id for r in residual],
            )
        ordered.extend(residual)
    return ordered


def _matches_among(block: TieBlock, matches: List[MatchRecord]) -> List[MatchRecord]:
    members = {r.team_id for r in block}
    return [m for m in matches if m.home_team_id in members and m.away_team_id in members]
