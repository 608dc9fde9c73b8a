"""
Normalize confirmed results and predicted guesses into MatchRecords.

Both producers carry the same fixture-keyed score shape; the standings engine
only ever sees MatchRecord, so which one fed a table is decided here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Union

from prode.services.group_standings import MatchOutcome, MatchRecord


@dataclass(frozen=True)
class Fixture:
    fixture_id: str
    home_team_id: str
    away_team_id: str


@dataclass(frozen=True)
class ConfirmedResult:
    fixture_id: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None


@dataclass(frozen=True)
class PredictedGuess:
    fixture_id: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None


ScoreEntry = Union[ConfirmedResult, PredictedGuess]


def _outcome_of(entry: Optional[ScoreEntry]) -> Optional[MatchOutcome]:
    if entry is None or entry.home_score is None or entry.away_score is None:
        return None
    return MatchOutcome(home_goals=entry.home_score, away_goals=entry.away_score)


def _to_records(fixtures: Sequence[Fixture], entries: Iterable[ScoreEntry]) -> List[MatchRecord]:
    by_fixture: Dict[str, ScoreEntry] = {e.fixture_id: e for e in entries}
    return [
        MatchRecord(
            home_team_id=f.home_team_id,
            away_team_id=f.away_team_id,
            outcome=_outcome_of(by_fixture.get(f.fixture_id)),
        )
        for f in fixtures
    ]


def records_from_results(
    fixtures: Sequence[Fixture], results: Iterable[ConfirmedResult]
) -> List[MatchRecord]:
    """One record per fixture; fixtures without a scored result get outcome=None."""
    return _to_records(fixtures, results)


def records_from_guesses(
    fixtures: Sequence[Fixture], guesses: Iterable[PredictedGuess]
) -> List[MatchRecord]:
    """One record per fixture; fixtures the user has not guessed get outcome=None."""
    return _to_records(fixtures, guesses)


def select_group_records(
    fixtures: Sequence[Fixture],
    results: Iterable[ConfirmedResult],
    guesses: Iterable[PredictedGuess],
) -> Optional[List[MatchRecord]]:
    """
    Pick the source for a group table.

    Confirmed results win when every fixture has one; otherwise the user's
    guesses are used when every fixture is guessed. Returns None when neither
    source covers the whole group.
    """
    from_results = records_from_results(fixtures, results)
    if all(r.outcome is not None for r in from_results):
        return from_results

    from_guesses = records_from_guesses(fixtures, guesses)
    if all(r.outcome is not None for r in from_guesses):
        return from_guesses

    return None
