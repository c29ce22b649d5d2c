"""Phase router: public flag snapshot and the phase-gate dependency."""

from fastapi import APIRouter, Depends, HTTPException, Request

from hacksite.models.admin_phase import PhaseName
from hacksite.services.phases import PhaseCache, is_phase_open

router = APIRouter(prefix="/phases", tags=["phases"])

CLOSED_MESSAGES = {
    PhaseName.IDEAS_OPEN: "Idea submissions are not open",
    PhaseName.IDEAS_VOTING: "Idea voting is not open",
    PhaseName.TEAMS_OPEN: "Team creation is not open yet",
    PhaseName.SUBMISSIONS_OPEN: "Project submissions are not open yet",
    PhaseName.SHOWCASE_VOTING: "Showcase voting is not open",
    PhaseName.WINNERS_REVEALED: "Winners have not been revealed",
}


def get_phase_cache(request: Request) -> PhaseCache:
    return request.app.state.phase_cache


def require_phase(phase: PhaseName):
    """Dependency factory: 403 unless ``phase`` is open by flag or schedule."""

    async def check(cache: PhaseCache = Depends(get_phase_cache)) -> None:
        if not await is_phase_open(cache, phase):
            raise HTTPException(status_code=403, detail=CLOSED_MESSAGES[phase])

    return check


@router.get("")
async def list_phases(cache: PhaseCache = Depends(get_phase_cache)):
    """Effective open/closed state of every phase."""
    return {phase.value: await is_phase_open(cache, phase) for phase in PhaseName}
