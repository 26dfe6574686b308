"""In-memory implementation of IProfileProvider."""

from typing import Dict, Optional

from domain.plan.core.ports.profile_provider import IProfileProvider
from domain.plan.core.value_objects.user_biometrics import UserBiometrics


class InMemoryProfileProvider(IProfileProvider):
    """
    Dictionary-backed profile provider.

    Stands in for the user-profile component in tests and local runs.
    """

    def __init__(self, profiles: Optional[Dict[str, UserBiometrics]] = None) -> None:
        self._profiles: Dict[str, UserBiometrics] = dict(profiles or {})

    async def get_biometrics(self, user_id: str) -> Optional[UserBiometrics]:
        return self._profiles.get(user_id)

    def set_biometrics(self, user_id: str, biometrics: UserBiometrics) -> None:
        """Create or replace a user's biometrics."""
        self._profiles[user_id] = biometrics

    def remove(self, user_id: str) -> None:
        self._profiles.pop(user_id, None)

    def count(self) -> int:
        return len(self._profiles)
