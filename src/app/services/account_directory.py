"""Account Directory Interface

Profile lookup owned by the authentication service. Read-only for the
order core.
"""

from abc import ABC, abstractmethod
from typing import Optional
from pydantic import BaseModel


class Profile(BaseModel):
    user_id: str
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class AccountDirectory(ABC):
    @abstractmethod
    async def get_profile(self, user_id: str) -> Optional[Profile]:
        """
        Returns:
            Profile, or None when the directory has no profile for the user

        Raises:
            CollaboratorError: directory unreachable or answered with an error
        """
        pass
