"""
Profile repository.

Profiles are owned by the backend and only reachable through its stored
functions; onboarding answers are inserted into ``onboarding_responses``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .base import SupabaseRepository


class IProfileRepository(ABC):
    """Abstract repository interface for user profiles."""

    @abstractmethod
    async def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get the profile of a user, or None if the backend has none."""
        pass

    @abstractmethod
    async def update(self, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update profile fields.

        Args:
            user_id: Profile owner
            fields: Unprefixed field names (``full_name``, ``city``, ...)

        Returns:
            Backend response payload
        """
        pass

    @abstractmethod
    async def save_onboarding_responses(self, user_id: str, responses: List[Dict[str, Any]]) -> None:
        """Store answered onboarding questions."""
        pass


class SupabaseProfileRepository(SupabaseRepository, IProfileRepository):
    """Profiles behind ``get_user_by_id`` and ``update_user_profile``."""

    async def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        data = self._rpc("get_user_by_id", {"p_user_id": user_id})
        if isinstance(data, dict) and "user" in data:
            return data["user"]
        if isinstance(data, list):
            return data[0] if data else None
        return data or None

    async def update(self, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        params = {"p_user_id": user_id}
        params.update({f"p_{name}": value for name, value in fields.items()})
        return self._rpc("update_user_profile", params) or {}

    async def save_onboarding_responses(self, user_id: str, responses: List[Dict[str, Any]]) -> None:
        if not responses:
            return

        rows = [
            {
                "user_id": user_id,
                "question_id": response["question_id"],
                "answer": response["answer"],
                "points_beginner": response.get("points_beginner", 0),
                "points_intermediate": response.get("points_intermediate", 0),
                "points_professional": response.get("points_professional", 0),
            }
            for response in responses
        ]
        self._execute(
            "save_onboarding_responses",
            lambda client: client.table("onboarding_responses").insert(rows),
        )
