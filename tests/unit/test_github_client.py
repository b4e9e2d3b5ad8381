# tests/unit/test_github_client.py
from datetime import datetime, timezone
from unittest.mock import MagicMock, Mock

import pytest
import requests

from repo_lister.domain.fetcher import FetchError
from repo_lister.domain.repository import Owner
from repo_lister.infrastructure.github_client import GitHubRestClient


def github_repo(full_name="takenet/blip", description="Bot platform", language="C#",
                created_at="2019-05-10T12:30:00Z", avatar_url="https://avatars.githubusercontent.com/u/1"):
    return {
        "id": 1,
        "full_name": full_name,
        "description": description,
        "language": language,
        "created_at": created_at,
        "owner": {"login": "takenet", "avatar_url": avatar_url},
        "stargazers_count": 3,
    }


def mock_session(status_code=200, json_body=None, json_error=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_body
    session = MagicMock()
    session.get.return_value = response
    return session


@pytest.mark.unit
class TestGitHubRestClient:
    """Unit tests for GitHubRestClient"""

    def test_requests_single_page_of_org_repos(self):
        session = mock_session(json_body=[])
        client = GitHubRestClient("takenet", token="secret", session=session)

        client.fetch()

        args, kwargs = session.get.call_args
        assert args[0] == "https://api.github.com/orgs/takenet/repos"
        assert kwargs["params"] == {"per_page": 100}
        assert kwargs["timeout"] == 30
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["headers"]["User-Agent"] == "GitHubRepoListerAPI/1.0"

    def test_token_from_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "from-env")

        client = GitHubRestClient("takenet", session=mock_session(json_body=[]))

        assert client.headers["Authorization"] == "Bearer from-env"

    def test_no_token_sends_no_authorization(self, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)

        client = GitHubRestClient("takenet", session=mock_session(json_body=[]))

        assert "Authorization" not in client.headers

    def test_custom_api_url(self):
        session = mock_session(json_body=[])
        client = GitHubRestClient("acme", token="t", api_url="https://ghe.example/api/v3/", session=session)

        client.fetch()

        assert session.get.call_args[0][0] == "https://ghe.example/api/v3/orgs/acme/repos"

    def test_decodes_repositories_in_order(self):
        session = mock_session(json_body=[github_repo("takenet/one"), github_repo("takenet/two")])
        client = GitHubRestClient("takenet", token="t", session=session)

        repos = client.fetch()

        assert [r.full_name for r in repos] == ["takenet/one", "takenet/two"]
        first = repos[0]
        assert first.description == "Bot platform"
        assert first.language == "C#"
        assert first.created_at == datetime(2019, 5, 10, 12, 30, tzinfo=timezone.utc)
        assert first.owner == Owner(avatar_url="https://avatars.githubusercontent.com/u/1")

    def test_null_description_and_language_become_empty(self):
        session = mock_session(json_body=[github_repo(description=None, language=None)])
        client = GitHubRestClient("takenet", token="t", session=session)

        repo = client.fetch()[0]

        assert repo.description == ""
        assert repo.language == ""

    def test_empty_listing_is_success(self):
        client = GitHubRestClient("takenet", token="t", session=mock_session(json_body=[]))

        assert client.fetch() == []

    @pytest.mark.parametrize("status_code", [401, 403, 404, 500, 502])
    def test_non_success_status(self, status_code):
        client = GitHubRestClient("takenet", token="t", session=mock_session(status_code=status_code))

        with pytest.raises(FetchError) as exc_info:
            client.fetch()

        assert exc_info.value.status_code == status_code

    def test_transport_error(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.ConnectionError("connection refused")
        client = GitHubRestClient("takenet", token="t", session=session)

        with pytest.raises(FetchError, match="connection refused"):
            client.fetch()

    def test_invalid_json(self):
        session = mock_session(json_error=ValueError("Expecting value"))
        client = GitHubRestClient("takenet", token="t", session=session)

        with pytest.raises(FetchError, match="not valid JSON"):
            client.fetch()

    def test_object_instead_of_list(self):
        session = mock_session(json_body={"message": "Not Found"})
        client = GitHubRestClient("takenet", token="t", session=session)

        with pytest.raises(FetchError, match="JSON array"):
            client.fetch()

    @pytest.mark.parametrize("broken", [
        {"description": "no name"},
        {**github_repo(), "created_at": "yesterday"},
        {**github_repo(), "created_at": None},
        {**github_repo(), "owner": "takenet"},
        "takenet/blip",
        github_repo(full_name=None),
        github_repo(full_name=42),
        github_repo(language=5),
        github_repo(language=["Go"]),
        github_repo(description={"text": "x"}),
        github_repo(description=0),
        github_repo(avatar_url=7),
    ])
    def test_malformed_entries(self, broken):
        session = mock_session(json_body=[github_repo(), broken])
        client = GitHubRestClient("takenet", token="t", session=session)

        with pytest.raises(FetchError):
            client.fetch()

    def test_null_avatar_becomes_empty(self):
        session = mock_session(json_body=[github_repo(avatar_url=None)])
        client = GitHubRestClient("takenet", token="t", session=session)

        assert client.fetch()[0].owner_avatar_url == ""
