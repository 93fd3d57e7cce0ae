from typing import Any, Optional

import pytest
import requests

from portfolio_terminal.api import client as client_module
from portfolio_terminal.api.client import PortfolioApiClient, PortfolioApiError
from portfolio_terminal.api.models import Project, Skill


class DummyResponse:
    def __init__(self, status_code: int, data: Any = None, invalid_json: bool = False):
        self.status_code = status_code
        self._data = data
        self._invalid_json = invalid_json

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("not json")
        return self._data


class RecordingGet:
    def __init__(self, response: Optional[DummyResponse] = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def __call__(self, url: str, **kwargs: Any) -> DummyResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


def install(monkeypatch: pytest.MonkeyPatch, get: RecordingGet) -> RecordingGet:
    monkeypatch.setattr(client_module.requests, "get", get)
    return get


def test_get_skills_sends_user_id(monkeypatch: pytest.MonkeyPatch) -> None:
    get = install(
        monkeypatch,
        RecordingGet(
            DummyResponse(200, [{"name": "Python", "category": "Backend", "level": 4}])
        ),
    )
    client = PortfolioApiClient("http://api.test/api/", "7")

    skills = client.get_skills()

    assert skills == [Skill("Python", "Backend", 4)]
    assert get.calls[0]["url"] == "http://api.test/api/skills"
    assert get.calls[0]["params"] == {"userId": "7"}
    assert get.calls[0]["timeout"] == client.timeout


def test_list_wrapped_in_data_is_unwrapped(monkeypatch: pytest.MonkeyPatch) -> None:
    install(
        monkeypatch,
        RecordingGet(
            DummyResponse(
                200,
                {"data": [{"title": "Site", "technologies": "React, Vite", "live_url": ""}]},
            )
        ),
    )
    projects = PortfolioApiClient("http://api.test", "1").get_projects()
    assert projects == [Project("Site", None, ["React", "Vite"], None, None)]


def test_profile_uses_public_username_endpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    get = install(
        monkeypatch,
        RecordingGet(DummyResponse(200, {"name": "Ada", "email": " ada@example.dev "})),
    )
    profile = PortfolioApiClient("http://api.test", "1", username="ada l").get_profile()

    assert profile.name == "Ada"
    assert profile.email == "ada@example.dev"
    assert get.calls[0]["url"] == "http://api.test/profile/public/username/ada%20l"


def test_profile_without_username_fails() -> None:
    with pytest.raises(PortfolioApiError):
        PortfolioApiClient("http://api.test", "1").get_profile()


@pytest.mark.parametrize(
    "get",
    [
        RecordingGet(DummyResponse(500, [])),
        RecordingGet(DummyResponse(200, invalid_json=True)),
        RecordingGet(DummyResponse(200, {"unexpected": True})),
        RecordingGet(error=requests.ConnectionError("refused")),
    ],
)
def test_failures_raise_api_error(monkeypatch: pytest.MonkeyPatch, get: RecordingGet) -> None:
    install(monkeypatch, get)
    with pytest.raises(PortfolioApiError):
        PortfolioApiClient("http://api.test", "1").get_experiences()


def test_skill_level_is_at_least_one() -> None:
    assert Skill.from_dict({"name": "Go", "level": "0"}).level == 1
    assert Skill.from_dict({"name": "Go", "level": "x"}).level == 1
    assert Skill.from_dict({"name": "Go"}).category == "General"
