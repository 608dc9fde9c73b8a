"""
Group table endpoint. Stateless: the caller posts teams, matches and the
group's head-to-head setting; nothing is stored.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, field_validator

from prode.services.group_standings import (
    MatchOutcome,
    MatchRecord,
    StandingsError,
    compute_group_standings,
    is_group_complete,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class OutcomeIn(BaseModel):
    home_goals: int
    away_goals: int


class MatchIn(BaseModel):
    home_team_id: str
    away_team_id: str
    outcome: Optional[OutcomeIn] = None


class StandingsRequest(BaseModel):
    team_ids: List[str]
    matches: List[MatchIn] = []
    head_to_head_first: bool = False

    @field_validator("team_ids")
    @classmethod
    def validate_team_ids(cls, v):
        if not v:
            raise ValueError("team_ids must not be empty")
        return v


class StandingRowOut(BaseModel):
    position: int
    team_id: str
    games_played: int
    wins: int
    draws: int
    losses: int
    goals_for: int
    goals_against: int
    goal_difference: int
    points: int


class StandingsResponse(BaseModel):
    standings: List[StandingRowOut]
    complete: bool


def to_match_records(matches: List[MatchIn]) -> List[MatchRecord]:
    return [
        MatchRecord(
            home_team_id=m.home_team_id,
            away_team_id=m.away_team_id,
            outcome=(
                MatchOutcome(home_goals=m.outcome.home_goals, away_goals=m.outcome.away_goals)
                if m.outcome
                else None
            ),
        )
        for m in matches
    ]


def standings_error_to_http(exc: StandingsError) -> HTTPException:
    logger.info("Rejected standings input: %s", exc)
    return HTTPException(status_code=422, detail=str(exc))


@router.post("/standings", response_model=StandingsResponse)
def compute_standings(payload: StandingsRequest):
    records = to_match_records(payload.matches)
    try:
        rows = compute_group_standings(payload.team_ids, records, payload.head_to_head_first)
    except StandingsError as exc:
        raise standings_error_to_http(exc)

    return StandingsResponse(
        standings=[
            StandingRowOut(
                position=pos,
                team_id=r.team_id,
                games_played=r.games_played,
                wins=r.wins,
                draws=r.draws,
                losses=r.losses,
                goals_for=r.goals_for,
                goals_against=r.goals_against,
                goal_difference=r.goal_difference,
                points=r.points,
            )
            for pos, r in enumerate(rows, start=1)
        ],
        complete=is_group_complete(records),
    )
