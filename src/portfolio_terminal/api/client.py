import logging
from typing import Any, List, Optional
from urllib.parse import quote

import requests

from portfolio_terminal.api.models import (
    Education,
    Experience,
    Project,
    Skill,
    UserProfile,
)

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 10.0


class PortfolioApiError(Exception):
    """Raised when the portfolio API cannot deliver a record."""


class PortfolioApiClient:
    """Blocking client for the public read endpoints of the portfolio API."""

    def __init__(
        self,
        base_url: str,
        user_id: str,
        username: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.user_id = user_id
        self.username = username
        self.timeout = timeout

    def _get(self, path: str, params: Optional[dict[str, str]] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url} params={params}")
        try:
            response = requests.get(
                url,
                params=params,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise PortfolioApiError(f"Request to {url} failed: {e}") from e

        if response.status_code != 200:
            raise PortfolioApiError(
                f"Request to {url} returned status {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise PortfolioApiError(f"Response from {url} is not JSON") from e

    def _get_list(self, path: str) -> List[Any]:
        data = self._get(path, params={"userId": self.user_id})
        if isinstance(data, dict) and isinstance(data.get("data"), list):
            data = data["data"]
        if not isinstance(data, list):
            raise PortfolioApiError(f"Expected a list from {path}")
        return data

    def get_skills(self) -> List[Skill]:
        return [Skill.from_dict(item) for item in self._get_list("/skills")]

    def get_projects(self) -> List[Project]:
        return [Project.from_dict(item) for item in self._get_list("/projects")]

    def get_experiences(self) -> List[Experience]:
        return [Experience.from_dict(item) for item in self._get_list("/experiences")]

    def get_education(self) -> List[Education]:
        return [Education.from_dict(item) for item in self._get_list("/education")]

    def get_profile(self) -> UserProfile:
        if not self.username:
            raise PortfolioApiError("No username configured for the profile endpoint")
        data = self._get(f"/profile/public/username/{quote(self.username)}")
        if not isinstance(data, dict):
            raise PortfolioApiError("Expected an object from the profile endpoint")
        return UserProfile.from_dict(data)
