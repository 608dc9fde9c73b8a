"""
Playoff slot resolution from posted group data.
"""
from typing import Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, field_validator

from prode.routes.standings import MatchIn, standings_error_to_http, to_match_records
from prode.services.group_standings import StandingsError
from prode.services.match_sources import ConfirmedResult, Fixture, PredictedGuess
from prode.services.qualification import (
    THIRD_PLACE,
    GroupFinishRule,
    GroupTable,
    PlayoffSlot,
    build_group_table,
    build_group_table_from_sources,
    resolve_playoff_slots,
    third_place_combination_key,
)

router = APIRouter()


class FixtureIn(BaseModel):
    fixture_id: str
    home_team_id: str
    away_team_id: str


class ScoreIn(BaseModel):
    fixture_id: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None


class GroupIn(BaseModel):
    """
    Either `matches` (already normalized) or `fixtures` with the confirmed
    `results` and the user's `guesses` keyed by fixture id.
    """

    group_letter: str
    team_ids: List[str]
    matches: List[MatchIn] = []
    fixtures: Optional[List[FixtureIn]] = None
    results: List[ScoreIn] = []
    guesses: List[ScoreIn] = []
    head_to_head_first: bool = False

    @field_validator("group_letter")
    @classmethod
    def validate_group_letter(cls, v):
        if not v or not v.strip():
            raise ValueError("group_letter is required")
        return v.strip().upper()


class FinishRuleIn(BaseModel):
    group: str
    position: int

    @field_validator("position")
    @classmethod
    def validate_position(cls, v):
        if v < 1:
            raise ValueError("position must be >= 1")
        return v


class SlotIn(BaseModel):
    slot_id: str
    home_rule: FinishRuleIn
    away_rule: FinishRuleIn


class ResolveRequest(BaseModel):
    groups: List[GroupIn]
    slots: List[SlotIn]
    third_place_rules: Optional[Dict[str, Dict[str, str]]] = None


class ResolvedSlotOut(BaseModel):
    slot_id: str
    home_team_id: Optional[str] = None
    away_team_id: Optional[str] = None


class ResolveResponse(BaseModel):
    slots: List[ResolvedSlotOut]
    third_place_combination: Optional[str] = None


def _group_table(group: GroupIn) -> GroupTable:
    if group.fixtures is None:
        return build_group_table(
            group.group_letter, group.team_ids, to_match_records(group.matches), group.head_to_head_first
        )
    return build_group_table_from_sources(
        group.group_letter,
        group.team_ids,
        [Fixture(f.fixture_id, f.home_team_id, f.away_team_id) for f in group.fixtures],
        [ConfirmedResult(r.fixture_id, r.home_score, r.away_score) for r in group.results],
        [PredictedGuess(g.fixture_id, g.home_score, g.away_score) for g in group.guesses],
        group.head_to_head_first,
    )


@router.post("/playoffs/resolve", response_model=ResolveResponse)
def resolve_playoffs(payload: ResolveRequest):
    try:
        tables = [_group_table(g) for g in payload.groups]
    except StandingsError as exc:
        raise standings_error_to_http(exc)

    slots = [
        PlayoffSlot(
            slot_id=s.slot_id,
            home_rule=GroupFinishRule(group=s.home_rule.group, position=s.home_rule.position),
            away_rule=GroupFinishRule(group=s.away_rule.group, position=s.away_rule.position),
        )
        for s in payload.slots
    ]
    resolved = resolve_playoff_slots(tables, slots, payload.third_place_rules)

    thirds_needed = sum(
        1 for s in slots for rule in (s.home_rule, s.away_rule) if rule.position == THIRD_PLACE
    )
    return ResolveResponse(
        slots=[
            ResolvedSlotOut(slot_id=r.slot_id, home_team_id=r.home_team_id, away_team_id=r.away_team_id)
            for r in resolved
        ],
        third_place_combination=third_place_combination_key(tables, thirds_needed),
    )
