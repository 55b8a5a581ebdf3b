# agents/writer_agent.py
import logging
from typing import List, Optional, Sequence

from models import DiffFile, ReviewComment, ReviewSuggestion

logger = logging.getLogger(__name__)


def _parse_line_number(raw: str) -> Optional[int]:
    try:
        line = int(str(raw).strip())
    except ValueError:
        return None
    return line if line > 0 else None


def to_comments(file: DiffFile, suggestions: Sequence[ReviewSuggestion]) -> List[ReviewComment]:
    """
    Turn service suggestions into review comments anchored on `file`.

    Suggestions with an empty body or an unusable line number are dropped;
    the rest keep the order the service returned them in. A file without a
    target path (deleted) yields nothing.
    """
    if file.target_path is None:
        return []

    comments = []
    for s in suggestions:
        line = _parse_line_number(s.line_number)
        if line is None:
            logger.warning("Dropping suggestion for %s: bad line number %r", file.target_path, s.line_number)
            continue
        if not s.review_comment.strip():
            logger.warning("Dropping suggestion for %s:%d: empty comment", file.target_path, line)
            continue
        comments.append(ReviewComment(path=file.target_path, line=line, body=s.review_comment))
    return comments
