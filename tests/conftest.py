"""Shared diff samples and test doubles."""

from typing import Callable, List, Optional

import pytest

from models import ReviewOutcome, ReviewSuggestion

SINGLE_FILE_DIFF = """\
diff --git a/src/x.ts b/src/x.ts
index 83db48f..bf269f4 100644
--- a/src/x.ts
+++ b/src/x.ts
@@ -40,3 +40,4 @@ export function main() {
 const a = 1;
 const b = 2;
+  foo()
 return a + b;
"""

TWO_FILE_DIFF = """\
diff --git a/a.py b/a.py
index 1111111..2222222 100644
--- a/a.py
+++ b/a.py
@@ -1,2 +1,3 @@
 import os
+import sys
 x = 1
@@ -10,2 +11,3 @@ def f():
 y = 2
+z = 3
 return y
diff --git a/b.py b/b.py
index 3333333..4444444 100644
--- a/b.py
+++ b/b.py
@@ -5,1 +5,2 @@
 a = 1
+b = 2
"""

DELETED_FILE_DIFF = """\
diff --git a/old.py b/old.py
deleted file mode 100644
index 1234567..0000000
--- a/old.py
+++ /dev/null
@@ -1,2 +0,0 @@
-import os
-print(os.name)
"""

NEW_FILE_DIFF = """\
diff --git a/docs/README.md b/docs/README.md
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/docs/README.md
@@ -0,0 +1,2 @@
+# Title
+text
"""


def suggestion(line_number, comment: str) -> ReviewSuggestion:
    return ReviewSuggestion(lineNumber=line_number, reviewComment=comment)


class FakeReviewClient:
    """Stands in for ReviewClient; answers each prompt via `respond`."""

    def __init__(self, respond: Optional[Callable[[str], ReviewOutcome]] = None):
        self.prompts: List[str] = []
        self._respond = respond or (lambda prompt: ReviewOutcome.ok([]))

    async def review(self, prompt: str) -> ReviewOutcome:
        self.prompts.append(prompt)
        return self._respond(prompt)


@pytest.fixture
def fake_client() -> FakeReviewClient:
    return FakeReviewClient()
