"""HTTP routes for the circle battle API."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel, ConfigDict

from circlebattle.api.runtime import ApiState
from circlebattle.domain.enums import RequestDirection, RequestStatus

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class _View(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CardView(_View):
    id: str
    name: str
    grade: int
    position: str
    hobby: str
    description: str
    image_url: str
    creator_id: str
    circle_id: str | None
    affiliated_group: str | None
    max_hp: int
    attack: int
    flavor: str
    current_hp: int


class PlayerView(_View):
    player_id: str
    circle_id: str
    circle_name: str
    hp: int
    deck: list[CardView]


class BattleView(_View):
    battle_id: str
    player_me: PlayerView
    player_opponent: PlayerView
    current_turn: int
    current_player_id: str
    winner_id: str
    logs: list[str]
    version: int | None


class BattleRequestView(_View):
    request_id: str
    from_circle_id: str
    from_circle_name: str
    to_circle_id: str
    to_circle_name: str
    status: RequestStatus
    created_at: datetime
    battle_id: str | None


class StartBattleRequest(BaseModel):
    my_circle_id: str
    opponent_circle_id: str


class AttackRequest(BaseModel):
    player_id: str


class RetreatRequest(BaseModel):
    player_id: str
    bench_index: int


class SendBattleRequest(BaseModel):
    from_circle_id: str
    to_circle_id: str


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "store_backend": state.settings.store_backend,
        "card_source_backend": state.settings.card_source_backend,
        "database_ok": state.database_healthy(),
    }


@router.post("/battles", response_model=BattleView, status_code=status.HTTP_201_CREATED)
async def start_battle(request: StartBattleRequest, state: ApiStateDep) -> BattleView:
    battle = state.battles.start_battle(request.my_circle_id, request.opponent_circle_id)
    return BattleView.model_validate(battle)


@router.get("/battles/{battle_id}", response_model=BattleView)
async def get_battle(battle_id: str, state: ApiStateDep) -> BattleView:
    return BattleView.model_validate(state.battles.get_battle(battle_id))


@router.post("/battles/{battle_id}/attack", response_model=BattleView)
async def attack(battle_id: str, request: AttackRequest, state: ApiStateDep) -> BattleView:
    battle = state.battles.attack(battle_id, request.player_id)
    return BattleView.model_validate(battle)


@router.post("/battles/{battle_id}/retreat", response_model=BattleView)
async def retreat(battle_id: str, request: RetreatRequest, state: ApiStateDep) -> BattleView:
    battle = state.battles.retreat(battle_id, request.player_id, request.bench_index)
    return BattleView.model_validate(battle)


@router.post(
    "/battle-requests",
    response_model=BattleRequestView,
    status_code=status.HTTP_201_CREATED,
)
async def send_battle_request(
    request: SendBattleRequest, state: ApiStateDep
) -> BattleRequestView:
    sent = state.requests.send_battle_request(request.from_circle_id, request.to_circle_id)
    return BattleRequestView.model_validate(sent)


@router.get("/battle-requests/{request_id}", response_model=BattleRequestView)
async def get_battle_request(request_id: str, state: ApiStateDep) -> BattleRequestView:
    return BattleRequestView.model_validate(state.requests.get_battle_request(request_id))


@router.get("/circles/{circle_id}/battle-requests", response_model=list[BattleRequestView])
async def list_battle_requests(
    circle_id: str,
    state: ApiStateDep,
    direction: RequestDirection = RequestDirection.INCOMING,
    status_filter: Annotated[RequestStatus | None, Query(alias="status")] = None,
) -> list[BattleRequestView]:
    requests = state.requests.list_battle_requests(
        circle_id, direction=direction, status=status_filter
    )
    return [BattleRequestView.model_validate(item) for item in requests]


@router.post("/battle-requests/{request_id}/accept", response_model=BattleView)
async def accept_battle_request(request_id: str, state: ApiStateDep) -> BattleView:
    battle = state.requests.accept_battle_request(request_id)
    return BattleView.model_validate(battle)


@router.post("/battle-requests/{request_id}/reject", response_model=BattleRequestView)
async def reject_battle_request(request_id: str, state: ApiStateDep) -> BattleRequestView:
    return BattleRequestView.model_validate(state.requests.reject_battle_request(request_id))
