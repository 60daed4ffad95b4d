"""Profile and onboarding router."""

from typing import Any, Dict, List

import structlog
from fastapi import APIRouter, Depends

from ..auth import CurrentUser, get_current_user
from ..dependencies import get_profile_service
from ..models import ErrorResponse, OnboardingRequest, ProfileUpdate
from ..services.profile_service import ProfileService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Profile"])


@router.get("/profile", response_model=Dict[str, Any], summary="Get profile")
async def get_profile(
    user: CurrentUser = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    """
    Get the signed-in user's profile.

    Users the backend has no profile row for get the identity from their token.
    """
    profile = await profile_service.get_profile(user.id)
    if profile is None:
        return {"id": user.id, "email": user.email, "role": user.role.value}
    return profile


@router.patch(
    "/profile",
    response_model=Dict[str, Any],
    responses={400: {"description": "Rejected by backend", "model": ErrorResponse}},
    summary="Update profile",
)
async def update_profile(
    updates: ProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    return await profile_service.update_profile(user.id, updates)


@router.post("/profile/onboarding", response_model=Dict[str, Any], summary="Complete onboarding")
async def complete_onboarding(
    request: OnboardingRequest,
    user: CurrentUser = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    """Store questionnaire answers and set the skill level."""
    level = await profile_service.complete_onboarding(user.id, request.responses, request.skill_level)
    return {"skill_level": level.value, "onboarding_completed": True}


@router.get("/onboarding/questions", response_model=List[Dict[str, Any]], summary="Onboarding questions")
async def onboarding_questions():
    return ProfileService.onboarding_questions()
