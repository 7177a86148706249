from collections.abc import Sequence
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.core.enums import PvPStatus
from app.core.security import get_current_player
from app.models.player import Player
from app.models.pvp_challenge import PvPChallenge
from app.schemas.common import APIResponse, PaginatedResponse
from app.schemas.pvp_challenge import (
    PvPBattleResult,
    PvPChallengeCreate,
    SubmitDeckRequest,
    SubmitDeckResponse,
)
from app.services.pvp_challenge import PvPChallengeService

router = APIRouter(prefix="/pvp-challenges", tags=["pvp-challenges"])


@router.get("/")
async def get_pvp_challenges(
    service: Annotated[PvPChallengeService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1)] = 10,
    status: Annotated[PvPStatus | None, Query(description="Filter by status")] = None,
) -> PaginatedResponse[Sequence[PvPChallenge]]:
    pvp_challenges, pagination = await service.get_pvp_challenges(
        page=page, page_size=page_size, player_id=player.id, status=status
    )
    return PaginatedResponse(data=pvp_challenges, pagination=pagination)


@router.get("/{pvp_challenge_id}")
async def get_pvp_challenge(
    pvp_challenge_id: int,
    service: Annotated[PvPChallengeService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[PvPChallenge]:
    pvp_challenge = await service.get_participant_challenge(pvp_challenge_id, player.id)
    return APIResponse(data=pvp_challenge)


@router.post("/")
async def create_pvp_challenge(
    request: PvPChallengeCreate,
    service: Annotated[PvPChallengeService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[PvPChallenge]:
    challenge = await service.create_challenge(player, request.opponent_id)
    return APIResponse(data=challenge, message="Challenge sent")


@router.post("/{pvp_challenge_id}/accept")
async def accept_pvp_challenge(
    pvp_challenge_id: int,
    service: Annotated[PvPChallengeService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[PvPChallenge]:
    challenge = await service.respond(player, pvp_challenge_id, accept=True)
    return APIResponse(data=challenge, message="Challenge accepted")


@router.post("/{pvp_challenge_id}/decline")
async def decline_pvp_challenge(
    pvp_challenge_id: int,
    service: Annotated[PvPChallengeService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[PvPChallenge]:
    challenge = await service.respond(player, pvp_challenge_id, accept=False)
    return APIResponse(data=challenge, message="Challenge declined")


@router.post("/{pvp_challenge_id}/cancel")
async def cancel_pvp_challenge(
    pvp_challenge_id: int,
    service: Annotated[PvPChallengeService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[PvPChallenge]:
    challenge = await service.cancel(player, pvp_challenge_id)
    return APIResponse(data=challenge, message="Challenge cancelled")


@router.post("/{pvp_challenge_id}/deck")
async def submit_deck(
    pvp_challenge_id: int,
    request: SubmitDeckRequest,
    service: Annotated[PvPChallengeService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[SubmitDeckResponse]:
    result = await service.submit_deck(
        player, pvp_challenge_id, [slot.to_slot() for slot in request.cards]
    )
    return APIResponse(data=result, message="Deck submitted")


@router.post("/{pvp_challenge_id}/resolve")
async def resolve_pvp_challenge(
    pvp_challenge_id: int,
    service: Annotated[PvPChallengeService, Depends()],
    player: Annotated[Player, Depends(get_current_player)],
) -> APIResponse[PvPBattleResult]:
    result = await service.resolve(player, pvp_challenge_id)
    return APIResponse(data=result)
