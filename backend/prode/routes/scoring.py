"""
Qualifier scoring for one group: real results vs. a user's guesses.
"""
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, field_validator

from prode.routes.standings import MatchIn, standings_error_to_http, to_match_records
from prode.services.group_standings import StandingsError
from prode.services.qualifier_scoring import QualifierScoringConfig, score_group_predictions

router = APIRouter()


class ScoreRequest(BaseModel):
    team_ids: List[str]
    actual_matches: List[MatchIn] = []
    guessed_matches: List[MatchIn] = []
    head_to_head_first: bool = False
    qualifying_positions: int = 2
    qualified_team_points: Optional[int] = None
    exact_position_qualified_points: Optional[int] = None

    @field_validator("team_ids")
    @classmethod
    def validate_team_ids(cls, v):
        if not v:
            raise ValueError("team_ids must not be empty")
        return v

    @field_validator("qualifying_positions")
    @classmethod
    def validate_qualifying_positions(cls, v):
        if v < 0:
            raise ValueError("qualifying_positions must be >= 0")
        return v


class TeamScoreOut(BaseModel):
    team_id: str
    predicted_position: int
    actual_position: Optional[int] = None
    predicted_to_qualify: bool
    actually_qualified: bool
    points: int
    reason: str


class ScoreResponse(BaseModel):
    teams: List[TeamScoreOut]
    total_points: int


@router.post("/qualifiers/score", response_model=ScoreResponse)
def score_qualifiers(payload: ScoreRequest):
    defaults = QualifierScoringConfig()
    config = QualifierScoringConfig(
        qualified_team_points=(
            payload.qualified_team_points
            if payload.qualified_team_points is not None
            else defaults.qualified_team_points
        ),
        exact_position_qualified_points=(
            payload.exact_position_qualified_points
            if payload.exact_position_qualified_points is not None
            else defaults.exact_position_qualified_points
        ),
    )

    try:
        result = score_group_predictions(
            payload.team_ids,
            to_match_records(payload.actual_matches),
            to_match_records(payload.guessed_matches),
            head_to_head_first=payload.head_to_head_first,
            qualifying_positions=payload.qualifying_positions,
            config=config,
        )
    except StandingsError as exc:
        raise standings_error_to_http(exc)

    return ScoreResponse(
        teams=[
            TeamScoreOut(
                team_id=t.team_id,
                predicted_position=t.predicted_position,
                actual_position=t.actual_position,
                predicted_to_qualify=t.predicted_to_qualify,
                actually_qualified=t.actually_qualified,
                points=t.points,
                reason=t.reason,
            )
            for t in result.teams
        ],
        total_points=result.total_points,
    )
