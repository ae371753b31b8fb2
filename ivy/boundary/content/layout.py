"""
Content tree layout.

Maps paths inside the content tree to document slugs and strips YAML
front matter. Indexed paths:

    journal/<entry>.md          (AGENTS.md excluded)
    books/<book>/<chapter>.md
    docs/codex/<article>.md

Dependencies: none
System role: Shared corpus selection rules for every content source
"""

import re
from pathlib import PurePosixPath

FRONT_MATTER_RE = re.compile(r"^---\s*\n([\s\S]*?)\n---\s*\n([\s\S]*)")

EXCLUDED_FILES = frozenset({"AGENTS.md"})


def strip_front_matter(text: str) -> str:
    """
    Remove a leading YAML front matter block and trim the body.

    Args:
        text: Raw Markdown file content

    Returns:
        str: Body text without front matter
    """
    match = FRONT_MATTER_RE.match(text)
    return match.group(2).strip() if match else text.strip()


def slug_for(relative_path: str) -> str | None:
    """
    Slug for a path relative to the content root, None if not indexed.

    Examples:
        journal/finding-flow.md -> journal/finding-flow
        books/the-field/chapter-one.md -> books/the-field/chapter-one
        books/README.md -> None
    """
    path = PurePosixPath(relative_path)
    if path.suffix != ".md" or path.name in EXCLUDED_FILES:
        return None

    parts = path.parts
    if len(parts) == 2 and parts[0] == "journal":
        pass
    elif len(parts) == 3 and parts[0] == "books":
        pass
    elif len(parts) == 3 and parts[:2] == ("docs", "codex"):
        pass
    else:
        return None
    return str(path.with_suffix(""))
