"""Portfolio REST API client and its domain records."""

from .client import PortfolioApiClient, PortfolioApiError
from .models import Education, Experience, Project, Skill, UserProfile

__all__ = [
    "PortfolioApiClient",
    "PortfolioApiError",
    "Education",
    "Experience",
    "Project",
    "Skill",
    "UserProfile",
]
