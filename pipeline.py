"""Runs every reviewable chunk of a diff through the review service."""

import asyncio
import logging
from typing import List, Sequence, Tuple

from agents.diff_agent import diff_agent_summarize
from agents.llm_client import ReviewClient
from agents.review_agent import review_chunk
from models import Chunk, DiffFile, PRContext, ReviewComment

logger = logging.getLogger(__name__)


def _reviewable_chunks(files: Sequence[DiffFile]) -> List[Tuple[DiffFile, Chunk]]:
    jobs = []
    for f in files:
        if f.is_deleted:
            logger.info("Skipping deleted file %s", f.source_path)
            continue
        for chunk in f.chunks:
            jobs.append((f, chunk))
    return jobs


async def analyze_code(
    files: Sequence[DiffFile],
    pr: PRContext,
    client: ReviewClient,
    concurrency: int = 1,
) -> List[ReviewComment]:
    """
    Review each chunk of each non-deleted file and collect the comments in
    file, chunk, response order. With concurrency > 1 up to that many review
    calls run at once; the result order is the same as a sequential run.
    """
    for summary in diff_agent_summarize(list(files)):
        logger.debug("Diff summary: %s", summary)

    jobs = _reviewable_chunks(files)
    logger.info("Reviewing %d chunk(s) in PR %s/%s#%s", len(jobs), pr.owner, pr.repo, pr.pull_number)

    comments: List[ReviewComment] = []
    if concurrency <= 1:
        for f, chunk in jobs:
            comments.extend(await review_chunk(client, f, chunk, pr))
    else:
        semaphore = asyncio.Semaphore(concurrency)

        async def limited(f: DiffFile, chunk: Chunk) -> List[ReviewComment]:
            async with semaphore:
                return await review_chunk(client, f, chunk, pr)

        # gather keeps results in submission order
        results = await asyncio.gather(*(limited(f, chunk) for f, chunk in jobs))
        for chunk_comments in results:
            comments.extend(chunk_comments)

    logger.info("Collected %d review comment(s)", len(comments))
    return comments
