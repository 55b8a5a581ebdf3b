import logging
from typing import List, Optional

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError

from errors import DiffParseError
from models import ChangeLine, Chunk, DiffFile

logger = logging.getLogger(__name__)

DEV_NULL = "/dev/null"


def _strip_prefix(path: str, prefix: str) -> Optional[str]:
    if not path or path == DEV_NULL:
        return None
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


def _hunk_header(hunk) -> str:
    header = "@@ -%d,%d +%d,%d @@" % (
        hunk.source_start,
        hunk.source_length,
        hunk.target_start,
        hunk.target_length,
    )
    if hunk.section_header:
        header += " " + hunk.section_header
    return header


def _change_line(line) -> Optional[ChangeLine]:
    # new-side number when there is one, old-side number for pure deletions
    line_number = line.target_line_no if line.target_line_no is not None else line.source_line_no
    if line_number is None:
        return None
    if line.is_added:
        kind = "added"
    elif line.is_removed:
        kind = "removed"
    else:
        kind = "context"
    return ChangeLine(
        line_number=line_number,
        content=line.line_type + line.value.rstrip("\r\n"),
        kind=kind,
    )


def parse_unified_diff(diff_text: str) -> List[DiffFile]:
    """
    Parse unified diff text into DiffFile -> Chunk -> ChangeLine records.

    Raises DiffParseError when the text is blank, malformed, or contains no
    file sections at all; callers rely on a well-formed result.
    """
    if not diff_text or not diff_text.strip():
        raise DiffParseError("diff text is empty")

    try:
        patch = PatchSet(diff_text.splitlines(keepends=True))
    except UnidiffParseError as e:
        raise DiffParseError(f"malformed diff: {e}") from e

    files: List[DiffFile] = []
    for patched_file in patch:
        target_path = _strip_prefix(patched_file.target_file, "b/")
        if patched_file.is_removed_file:
            target_path = None

        chunks = []
        for hunk in patched_file:
            changes = [c for c in (_change_line(line) for line in hunk) if c is not None]
            chunks.append(Chunk(
                raw_content=_hunk_header(hunk),
                source_start=hunk.source_start,
                source_length=hunk.source_length,
                target_start=hunk.target_start,
                target_length=hunk.target_length,
                changes=changes,
            ))

        files.append(DiffFile(
            source_path=_strip_prefix(patched_file.source_file, "a/"),
            target_path=target_path,
            chunks=chunks,
        ))

    if not files:
        raise DiffParseError("no file sections found in diff text")

    logger.debug("Parsed %d file(s) from diff", len(files))
    return files
