from typing import List, Optional

from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from agents.llm_client import ReviewClient
from config import ActionConfig, parse_exclude_patterns
from diff_parser import parse_unified_diff
from errors import DiffParseError, GitHubError
from models import PRContext, ReviewComment, ReviewResponse
from pipeline import analyze_code
from utils.github_client import GitHubClient
from utils.path_filter import filter_files


class PRInput(BaseModel):
    owner: str
    repo: str
    pr_number: int


class PostReviewResponse(BaseModel):
    review: ReviewResponse
    submitted: bool


def _summary(comments: List[ReviewComment]) -> ReviewResponse:
    return ReviewResponse(review_summary=f"{len(comments)} comments generated", comments=comments)


def create_app(
    config: Optional[ActionConfig] = None,
    review_client: Optional[ReviewClient] = None,
    github_client: Optional[GitHubClient] = None,
) -> FastAPI:
    config = config or ActionConfig.from_env()
    review_client = review_client or ReviewClient(config.review_service)
    github_client = github_client or GitHubClient(config.github_token, config.github_api_url)

    app = FastAPI(title="PR Review Agent")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def analyze_diff_text(diff_text: str, pr: PRContext, patterns: List[str]) -> List[ReviewComment]:
        try:
            files = parse_unified_diff(diff_text)
        except DiffParseError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return await analyze_code(filter_files(files, patterns), pr, review_client, concurrency=config.concurrency)

    async def review_pr_comments(inp: PRInput) -> tuple:
        try:
            pr = await github_client.get_pr(inp.owner, inp.repo, inp.pr_number)
            diff_text = await github_client.get_diff(inp.owner, inp.repo, inp.pr_number)
        except GitHubError as e:
            raise HTTPException(status_code=502, detail=f"Failed to fetch PR from GitHub: {e}")
        if not diff_text.strip():
            return pr, []
        return pr, await analyze_diff_text(diff_text, pr, config.exclude_patterns)

    @app.post("/review-diff", response_model=ReviewResponse, summary="Review a unified diff (plain text)")
    async def review_diff(
        diff_text: str = Body(..., media_type="text/plain", description="The full unified diff as plain text."),
        exclude: Optional[str] = Query(None, description="Comma-separated glob patterns to skip."),
    ):
        patterns = parse_exclude_patterns(exclude) if exclude is not None else config.exclude_patterns
        pr = PRContext(owner="", repo="", pull_number=0)
        return _summary(await analyze_diff_text(diff_text, pr, patterns))

    @app.post("/review-pr", response_model=ReviewResponse, summary="Fetch a GitHub PR diff and review it")
    async def review_pr(inp: PRInput):
        _, comments = await review_pr_comments(inp)
        return _summary(comments)

    @app.post("/review-pr-and-post", response_model=PostReviewResponse)
    async def review_pr_and_post(inp: PRInput):
        pr, comments = await review_pr_comments(inp)
        if comments:
            try:
                await github_client.create_review(pr.owner, pr.repo, pr.pull_number, comments)
            except GitHubError as e:
                raise HTTPException(status_code=502, detail=f"Failed to submit review: {e}")
        return PostReviewResponse(review=_summary(comments), submitted=bool(comments))

    @app.get("/")
    def root():
        return {"status": "PR Review Agent running", "git_integration": bool(config.github_token)}

    return app


app = create_app()
