"""Tests for the action entry point (run / main)."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

import main
from conftest import SINGLE_FILE_DIFF, FakeReviewClient, suggestion
from config import ActionConfig, ReviewServiceConfig
from errors import ConfigError, DiffParseError, UnsupportedEventError
from models import PRContext, ReviewComment, ReviewOutcome

CONFIG = ActionConfig(
    github_token="gh-token",
    review_service=ReviewServiceConfig(api_url="https://review.example.com", api_key="k"),
)
PR = PRContext(owner="octo", repo="demo", pull_number=7, title="t", description="d")


def write_event(tmp_path: Path, **fields) -> str:
    event = {"number": 7, "repository": {"name": "demo", "owner": {"login": "octo"}}, **fields}
    path = tmp_path / "event.json"
    path.write_text(json.dumps(event))
    return str(path)


def fake_github(diff: str = SINGLE_FILE_DIFF) -> Mock:
    github = Mock()
    github.get_pr_details = AsyncMock(return_value=PR)
    github.get_diff = AsyncMock(return_value=diff)
    github.compare_diff = AsyncMock(return_value=diff)
    github.create_review = AsyncMock(return_value={"id": 1})
    return github


def commenting_client() -> FakeReviewClient:
    return FakeReviewClient(lambda prompt: ReviewOutcome.ok([suggestion("42", "avoid calling foo directly")]))


@pytest.mark.asyncio
async def test_opened_event_reviews_full_diff_and_submits_once(tmp_path: Path) -> None:
    github = fake_github()

    code = await main.run(CONFIG, write_event(tmp_path, action="opened"), github, commenting_client())

    assert code == 0
    github.get_diff.assert_awaited_once_with("octo", "demo", 7)
    github.compare_diff.assert_not_called()
    github.create_review.assert_awaited_once_with(
        "octo", "demo", 7, [ReviewComment(path="src/x.ts", line=42, body="avoid calling foo directly")]
    )


@pytest.mark.asyncio
async def test_synchronize_event_reviews_revision_range(tmp_path: Path) -> None:
    github = fake_github()
    event_path = write_event(tmp_path, action="synchronize", before="abc", after="def")

    code = await main.run(CONFIG, event_path, github, commenting_client())

    assert code == 0
    github.compare_diff.assert_awaited_once_with("octo", "demo", "abc", "def")
    github.get_diff.assert_not_called()


@pytest.mark.asyncio
async def test_no_comments_means_no_submission(tmp_path: Path) -> None:
    github = fake_github()

    code = await main.run(CONFIG, write_event(tmp_path, action="opened"), github, FakeReviewClient())

    assert code == 0
    github.create_review.assert_not_called()


@pytest.mark.asyncio
async def test_excluded_files_are_not_reviewed(tmp_path: Path) -> None:
    github = fake_github()
    client = commenting_client()
    config = CONFIG.model_copy(update={"exclude_patterns": ["src/*.ts"]})

    code = await main.run(config, write_event(tmp_path, action="opened"), github, client)

    assert code == 0
    assert client.prompts == []
    github.create_review.assert_not_called()


@pytest.mark.asyncio
async def test_empty_diff_stops_before_review(tmp_path: Path) -> None:
    github = fake_github(diff="  \n")
    client = commenting_client()

    code = await main.run(CONFIG, write_event(tmp_path, action="opened"), github, client)

    assert code == 0
    assert client.prompts == []


@pytest.mark.asyncio
@pytest.mark.parametrize("fields", [{"action": "closed"}, {"action": "synchronize"}, {}])
async def test_unsupported_events_fail_before_any_call(tmp_path: Path, fields) -> None:
    github = fake_github()

    with pytest.raises(UnsupportedEventError):
        await main.run(CONFIG, write_event(tmp_path, **fields), github, commenting_client())

    github.get_pr_details.assert_not_called()


@pytest.mark.asyncio
async def test_unparseable_diff_is_fatal(tmp_path: Path) -> None:
    github = fake_github(diff="@@ -1,1 +1,1 @@\n-a\n+b\n")
    client = commenting_client()

    with pytest.raises(DiffParseError):
        await main.run(CONFIG, write_event(tmp_path, action="opened"), github, client)

    assert client.prompts == []
    github.create_review.assert_not_called()


@pytest.mark.asyncio
async def test_missing_settings_are_fatal(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as exc_info:
        await main.run(ActionConfig(), write_event(tmp_path, action="opened"), fake_github(), FakeReviewClient())

    assert "GITHUB_TOKEN" in str(exc_info.value)
    assert "API_URL" in str(exc_info.value)


ENV_KEYS = ["GITHUB_TOKEN", "API_URL", "API_KEY", "EXCLUDE", "REVIEW_CONCURRENCY", "REVIEW_TIMEOUT"]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
        monkeypatch.delenv(f"INPUT_{key}", raising=False)
    monkeypatch.setattr("config.load_dotenv", lambda: None)
    monkeypatch.setattr(main, "setup_logging", lambda *args: None)
    return monkeypatch


def test_main_exits_non_zero_on_unsupported_event(tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("INPUT_GITHUB_TOKEN", "gh")
    clean_env.setenv("INPUT_API_URL", "https://review.example.com")
    clean_env.setenv("INPUT_API_KEY", "k")
    clean_env.setenv("GITHUB_EVENT_PATH", write_event(tmp_path, action="labeled"))

    assert main.main() == 1


def test_main_exits_non_zero_without_credentials(tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("GITHUB_EVENT_PATH", write_event(tmp_path, action="opened"))

    assert main.main() == 1


def test_main_exits_non_zero_on_bad_number_setting(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("REVIEW_CONCURRENCY", "many")

    assert main.main() == 1
