"""
Profile service.

Profiles are owned by the backend; this service only validates input and
calls its stored functions.
"""

from typing import Any, Dict, List, Optional

import structlog

from ..domain.entities import ONBOARDING_QUESTIONS, SkillLevel
from ..exceptions import ValidationException
from ..models import OnboardingAnswer, ProfileUpdate
from ..repositories.profile_repository import IProfileRepository
from ..utils import calculate_skill_level

logger = structlog.get_logger(__name__)


class ProfileService:
    """User profiles and onboarding."""

    def __init__(self, profile_repo: IProfileRepository):
        self.profile_repo = profile_repo

    async def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        return await self.profile_repo.get(user_id)

    async def update_profile(self, user_id: str, updates: ProfileUpdate) -> Dict[str, Any]:
        """
        Update the provided profile fields.

        Raises:
            ValidationException: If no field was provided
            BackendRejectedException: If the backend refuses the update
        """
        fields = updates.model_dump(exclude_none=True, mode="json")
        if not fields:
            raise ValidationException("profile", None, "No fields to update")

        result = await self.profile_repo.update(user_id, fields)
        logger.info("Profile updated", user_id=user_id, fields=sorted(fields))
        return result

    async def complete_onboarding(
        self,
        user_id: str,
        responses: List[OnboardingAnswer],
        skill_level: Optional[SkillLevel] = None,
    ) -> SkillLevel:
        """
        Store onboarding answers and mark onboarding complete.

        Args:
            user_id: Profile owner
            responses: Answered questions with their points
            skill_level: Explicit level; computed from the answers when omitted

        Returns:
            The skill level written to the profile
        """
        rows = [response.model_dump() for response in responses]
        await self.profile_repo.save_onboarding_responses(user_id, rows)

        level = skill_level or calculate_skill_level(rows)
        await self.profile_repo.update(
            user_id, {"skill_level": level.value, "onboarding_completed": True}
        )

        logger.info("Onboarding completed", user_id=user_id, skill_level=level.value, answers=len(rows))
        return level

    @staticmethod
    def onboarding_questions() -> List[Dict[str, Any]]:
        return ONBOARDING_QUESTIONS
