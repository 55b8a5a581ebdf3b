from typing import List

from models import DiffFile


def diff_agent_summarize(files: List[DiffFile]) -> List[dict]:
    summaries = []
    for f in files:
        changes = [c for chunk in f.chunks for c in chunk.changes]
        summaries.append({
            "file": f.target_path or f.source_path,
            "deleted": f.is_deleted,
            "chunks": len(f.chunks),
            "added_count": sum(1 for c in changes if c.kind == "added"),
            "removed_count": sum(1 for c in changes if c.kind == "removed"),
        })
    return summaries
