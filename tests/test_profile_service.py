"""
Tests for profiles and onboarding.
"""

import pytest

from storefront.domain.entities import SkillLevel
from storefront.exceptions import ValidationException
from storefront.models import OnboardingAnswer, ProfileUpdate


@pytest.mark.asyncio
class TestProfileService:
    async def test_get_profile(self, profile_service, profile_repo):
        profile_repo.profiles["user-1"] = {"id": "user-1", "full_name": "Nimal"}
        assert (await profile_service.get_profile("user-1"))["full_name"] == "Nimal"
        assert await profile_service.get_profile("nobody") is None

    async def test_update_sends_only_provided_fields(self, profile_service, profile_repo):
        await profile_service.update_profile("user-1", ProfileUpdate(city="Galle", skill_level=SkillLevel.INTERMEDIATE))
        assert profile_repo.profiles["user-1"] == {"id": "user-1", "city": "Galle", "skill_level": "intermediate"}

    async def test_update_requires_a_field(self, profile_service):
        with pytest.raises(ValidationException):
            await profile_service.update_profile("user-1", ProfileUpdate())

    async def test_onboarding_computes_skill_level(self, profile_service, profile_repo):
        answers = [
            OnboardingAnswer(question_id=1, answer="7+ years", points_intermediate=1, points_professional=5),
            OnboardingAnswer(question_id=2, answer="Teaching", points_professional=5),
        ]

        level = await profile_service.complete_onboarding("user-1", answers)

        assert level == SkillLevel.PROFESSIONAL
        assert profile_repo.profiles["user-1"]["skill_level"] == "professional"
        assert profile_repo.profiles["user-1"]["onboarding_completed"] is True
        assert [r["question_id"] for r in profile_repo.onboarding["user-1"]] == [1, 2]

    async def test_onboarding_with_explicit_level(self, profile_service, profile_repo):
        level = await profile_service.complete_onboarding("user-1", [], SkillLevel.INTERMEDIATE)
        assert level == SkillLevel.INTERMEDIATE
        assert profile_repo.onboarding.get("user-1", []) == []


def test_onboarding_questions(profile_service):
    questions = profile_service.onboarding_questions()
    assert [q["id"] for q in questions] == [1, 2, 3, 4, 5]
    assert all(len(q["options"]) == 5 for q in questions)
