"""IProfileProvider port - read access to user biometrics."""

from abc import ABC, abstractmethod
from typing import Optional

from ..value_objects.user_biometrics import UserBiometrics


class IProfileProvider(ABC):
    """Port for the user-profile collaborator.

    The profile component owns biometric data; the plan domain only
    reads it.
    """

    @abstractmethod
    async def get_biometrics(self, user_id: str) -> Optional[UserBiometrics]:
        """Load the biometrics used for target calculation.

        Args:
            user_id: User identifier

        Returns:
            Optional[UserBiometrics]: Possibly incomplete record, or None
                when the user has no profile settings at all
        """
        pass
