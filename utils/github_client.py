# utils/github_client.py

import json
import logging
from pathlib import Path
from typing import Optional, Sequence

import httpx

from errors import EventError, GitHubError
from models import PRContext, ReviewComment

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"


# -----------------------------------------------------------
# Workflow event payload
# -----------------------------------------------------------
def load_event(path: Optional[str]) -> dict:
    """
    Read the JSON event payload GitHub Actions writes to GITHUB_EVENT_PATH.
    """
    if not path:
        raise EventError("GITHUB_EVENT_PATH is not set")
    try:
        event = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise EventError(f"cannot read event file {path}: {e}") from e
    except ValueError as e:
        raise EventError(f"event file {path} is not valid JSON: {e}") from e
    if not isinstance(event, dict):
        raise EventError(f"event file {path} does not contain a JSON object")
    return event


def pr_coordinates(event: dict):
    """Return (owner, repo, pull_number) from a pull_request event."""
    try:
        repository = event["repository"]
        return repository["owner"]["login"], repository["name"], int(event["number"])
    except (KeyError, TypeError, ValueError) as e:
        raise EventError(f"event payload is missing pull request coordinates: {e!r}") from e


class GitHubClient:
    """PR source and review submission against the GitHub REST API."""

    def __init__(
        self,
        token: str,
        api_url: str = GITHUB_API_BASE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "PR-Review-Action",
        }
        if token:
            self.headers["Authorization"] = f"token {token}"
        self._transport = transport

    async def _request(self, method: str, path: str, accept: Optional[str] = None, **kwargs) -> httpx.Response:
        headers = dict(self.headers)
        if accept:
            headers["Accept"] = accept
        url = f"{self.api_url}{path}"

        async with httpx.AsyncClient(timeout=30.0, headers=headers, transport=self._transport) as client:
            try:
                resp = await client.request(method, url, **kwargs)
            except httpx.HTTPError as e:
                raise GitHubError(f"{method} {path} failed: {e!r}") from e

        if resp.status_code >= 400:
            raise GitHubError(
                f"GitHub returned {resp.status_code} for {method} {path}: {resp.text}",
                status_code=resp.status_code,
            )
        return resp

    # -----------------------------------------------------------
    # PR metadata and diffs
    # -----------------------------------------------------------
    async def get_pr_details(self, event: dict) -> PRContext:
        owner, repo, pull_number = pr_coordinates(event)
        return await self.get_pr(owner, repo, pull_number)

    async def get_pr(self, owner: str, repo: str, pull_number: int) -> PRContext:
        resp = await self._request("GET", f"/repos/{owner}/{repo}/pulls/{pull_number}")
        j = resp.json()
        return PRContext(
            owner=owner,
            repo=repo,
            pull_number=pull_number,
            title=j.get("title") or "",
            description=j.get("body") or "",
        )

    async def get_diff(self, owner: str, repo: str, pull_number: int) -> str:
        resp = await self._request("GET", f"/repos/{owner}/{repo}/pulls/{pull_number}", accept=DIFF_MEDIA_TYPE)
        return resp.text

    async def compare_diff(self, owner: str, repo: str, base: str, head: str) -> str:
        """Diff between two revisions, used for synchronize events."""
        resp = await self._request("GET", f"/repos/{owner}/{repo}/compare/{base}...{head}", accept=DIFF_MEDIA_TYPE)
        return resp.text

    # -----------------------------------------------------------
    # Review submission: all comments in one call
    # -----------------------------------------------------------
    async def create_review(
        self,
        owner: str,
        repo: str,
        pull_number: int,
        comments: Sequence[ReviewComment],
    ) -> dict:
        payload = {
            "comments": [c.model_dump() for c in comments],
            "event": "COMMENT",
        }
        resp = await self._request("POST", f"/repos/{owner}/{repo}/pulls/{pull_number}/reviews", json=payload)
        logger.info("Submitted review with %d comment(s) to %s/%s#%s", len(comments), owner, repo, pull_number)
        return resp.json()
