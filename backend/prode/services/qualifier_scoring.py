"""
Qualifier scoring: compare a user's guessed group order with the real one.

Rules per team:
  - Not predicted to qualify            -> 0
  - Predicted, but did not qualify      -> 0
  - Predicted, qualified, wrong position -> qualified_team_points
  - Predicted, qualified, exact position -> qualified_team_points
                                           + exact_position_qualified_points
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from prode import settings
from prode.services.group_standings import (
    MatchRecord,
    StandingRow,
    compute_group_standings,
    is_group_complete,
)


@dataclass(frozen=True)
class QualifierScoringConfig:
    qualified_team_points: int = field(default_factory=lambda: settings.QUALIFIED_TEAM_POINTS)
    exact_position_qualified_points: int = field(
        default_factory=lambda: settings.EXACT_POSITION_QUALIFIED_POINTS
    )


@dataclass(frozen=True)
class TeamPositionPrediction:
    team_id: str
    predicted_position: int  # 1-based
    predicted_to_qualify: bool


@dataclass
class TeamScore:
    team_id: str
    predicted_position: int
    actual_position: Optional[int]
    predicted_to_qualify: bool
    actually_qualified: bool
    points: int
    reason: str


@dataclass
class GroupScoringResult:
    teams: List[TeamScore]
    total_points: int


def score_team_prediction(
    prediction: TeamPositionPrediction,
    actually_qualified: bool,
    actual_position: Optional[int],
    config: Optional[QualifierScoringConfig] = None,
) -> TeamScore:
    config = config or QualifierScoringConfig()

    def _score(points: int, reason: str) -> TeamScore:
        return TeamScore(
            team_id=prediction.team_id,
            predicted_position=prediction.predicted_position,
            actual_position=actual_position,
            predicted_to_qualify=prediction.predicted_to_qualify,
            actually_qualified=actually_qualified,
            points=points,
            reason=reason,
        )

    if not prediction.predicted_to_qualify:
        if actually_qualified:
            return _score(0, "qualified, but user did not predict qualification")
        return _score(0, "user did not predict qualification")

    if not actually_qualified:
        if actual_position is None:
            return _score(0, "group not complete")
        return _score(0, "predicted qualification, but did not qualify")

    if actual_position is None:
        return _score(0, "qualified, but no position data")

    if prediction.predicted_position == actual_position:
        return _score(
            config.qualified_team_points + config.exact_position_qualified_points,
            "qualified + exact position",
        )
    return _score(config.qualified_team_points, "qualified, wrong position")


def predictions_from_standings(
    rows: Sequence[StandingRow], qualifying_positions: int
) -> List[TeamPositionPrediction]:
    """Read a guessed table as one prediction per team."""
    return [
        TeamPositionPrediction(
            team_id=row.team_id,
            predicted_position=pos,
            predicted_to_qualify=pos <= qualifying_positions,
        )
        for pos, row in enumerate(rows, start=1)
    ]


def score_group_predictions(
    team_ids: Sequence[str],
    actual_matches: Sequence[MatchRecord],
    guessed_matches: Sequence[MatchRecord],
    head_to_head_first: bool = False,
    qualifying_positions: int = 2,
    config: Optional[QualifierScoringConfig] = None,
) -> GroupScoringResult:
    """
    Score one group: standings from the real results against standings from
    the user's guesses. Until every real match is played nobody has qualified
    and actual positions are unknown. Until every match is guessed the user
    has predicted no qualifiers.
    """
    config = config or QualifierScoringConfig()
    actual_matches = list(actual_matches)
    guessed_matches = list(guessed_matches)

    guessed = compute_group_standings(team_ids, guessed_matches, head_to_head_first)
    # A partly guessed group is no prediction: nobody is predicted to qualify
    fully_guessed = bool(guessed_matches) and is_group_complete(guessed_matches)
    predicted_qualifiers = qualifying_positions if fully_guessed else 0
    predictions = predictions_from_standings(guessed, predicted_qualifiers)

    actual_positions = {}
    if is_group_complete(actual_matches):
        actual = compute_group_standings(team_ids, actual_matches, head_to_head_first)
        actual_positions = {row.team_id: pos for pos, row in enumerate(actual, start=1)}

    teams: List[TeamScore] = []
    for prediction in predictions:
        actual_position = actual_positions.get(prediction.team_id)
        actually_qualified = actual_position is not None and actual_position <= qualifying_positions
        teams.append(score_team_prediction(prediction, actually_qualified, actual_position, config))

    return GroupScoringResult(teams=teams, total_points=sum(t.points for t in teams))
