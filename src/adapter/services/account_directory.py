"""HTTP client for the account directory"""

import logging
from typing import Optional
import httpx
from src.app.services.account_directory import AccountDirectory, Profile
from src.app.services.catalog_store import CollaboratorError

logger = logging.getLogger(__name__)


class HttpAccountDirectory(AccountDirectory):
    """Reads profiles from GET {base_url}/profiles/{user_id}"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(f"{self.base_url}/profiles/{user_id}")
        except httpx.HTTPError as e:
            logger.warning(f"Profile lookup for user {user_id} failed: {e}")
            raise CollaboratorError(f"Account directory unavailable: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise CollaboratorError(f"Account directory answered HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise CollaboratorError(f"Account directory sent an unreadable profile: {e}") from e

        return Profile(
            user_id=user_id,
            name=data.get("name"),
            phone=data.get("phone"),
            email=data.get("email"),
        )
