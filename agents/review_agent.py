from typing import List

from agents.llm_client import ReviewClient
from agents.writer_agent import to_comments
from models import Chunk, DiffFile, PRContext, ReviewComment


def build_prompt(file: DiffFile, chunk: Chunk, pr: PRContext) -> str:
    """
    Render one chunk as the review request text: the hunk header followed by
    "<line number> <content>" for every change line, in order.

    Output format instructions live in the service's prompt template, so the
    text carries only the diff itself.
    """
    lines = "\n".join(f"{c.line_number} {c.content}" for c in chunk.changes)
    return f"""
diff
{chunk.raw_content}
{lines}
"""


async def review_chunk(client: ReviewClient, file: DiffFile, chunk: Chunk, pr: PRContext) -> List[ReviewComment]:
    prompt = build_prompt(file, chunk, pr)
    outcome = await client.review(prompt)
    return to_comments(file, outcome.suggestions)
