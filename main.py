"""
GitHub Action entry point.

Reads the pull_request event, fetches the matching diff, reviews every chunk
and submits all resulting comments as one review. Exit status is 0 unless a
fatal error (bad config, bad event, unparseable diff, GitHub failure) stops
the run.
"""

import asyncio
import logging
import os
import sys
from typing import Optional

from agents.llm_client import ReviewClient
from config import ActionConfig
from diff_parser import parse_unified_diff
from errors import ConfigError, ReviewerError, UnsupportedEventError
from pipeline import analyze_code
from utils.github_client import GitHubClient, load_event
from utils.logging_config import setup_logging
from utils.path_filter import filter_files

logger = logging.getLogger("pr_review")

SUPPORTED_ACTIONS = ("opened", "synchronize")


def check_event(event: dict) -> str:
    """Return the event action, raising for anything this action cannot review."""
    action = event.get("action")
    if action not in SUPPORTED_ACTIONS:
        raise UnsupportedEventError(
            f"unsupported event: {os.getenv('GITHUB_EVENT_NAME', '?')} (action={action!r})"
        )
    if action == "synchronize" and not (event.get("before") and event.get("after")):
        raise UnsupportedEventError("synchronize event without before/after revisions")
    return action


async def fetch_event_diff(github: GitHubClient, event: dict, owner: str, repo: str, pull_number: int) -> str:
    if check_event(event) == "synchronize":
        return await github.compare_diff(owner, repo, event["before"], event["after"])
    return await github.get_diff(owner, repo, pull_number)


async def run(
    config: ActionConfig,
    event_path: Optional[str],
    github: Optional[GitHubClient] = None,
    review_client: Optional[ReviewClient] = None,
) -> int:
    missing = config.missing_settings()
    if missing:
        raise ConfigError(f"missing required settings: {', '.join(missing)}")

    event = load_event(event_path)
    check_event(event)
    github = github or GitHubClient(config.github_token, config.github_api_url)

    pr = await github.get_pr_details(event)
    diff = await fetch_event_diff(github, event, pr.owner, pr.repo, pr.pull_number)
    if not diff or not diff.strip():
        logger.info("No diff found for %s/%s#%s", pr.owner, pr.repo, pr.pull_number)
        return 0

    files = filter_files(parse_unified_diff(diff), config.exclude_patterns)
    client = review_client or ReviewClient(config.review_service)
    comments = await analyze_code(files, pr, client, concurrency=config.concurrency)

    if comments:
        await github.create_review(pr.owner, pr.repo, pr.pull_number, comments)
    else:
        logger.info("No review comments produced, nothing to submit")
    return 0


def main() -> int:
    try:
        config = ActionConfig.from_env()
    except ConfigError as e:
        setup_logging()
        logger.error("Error: %s", e)
        return 1

    setup_logging(config.log_level)
    try:
        return asyncio.run(run(config, os.getenv("GITHUB_EVENT_PATH")))
    except ReviewerError as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
