"""
Split markdown documents into YAML frontmatter and body.

A document carries frontmatter when its first line is ``---`` and a later
line is ``---`` again; the YAML between the two is the metadata block:

```markdown
---
name: TestAgent1
role: Developer
---

# Test Agent 1
```

Hand-edited files are not guaranteed to be well formed, so nothing here
raises: an unterminated block, invalid YAML or YAML that is not a mapping
all count as "no metadata" and the whole text is returned as the body.
"""

import logging
import re
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# Opening delimiter on the first line, closing delimiter on its own line.
# The newline after the closing delimiter belongs to the block, not the body.
FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$(?:\n)?",
    re.DOTALL | re.MULTILINE,
)


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return ``(metadata, body)``; metadata is empty when absent or unparsable."""
    text = text.removeprefix("\ufeff")
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1))
    except (yaml.YAMLError, ValueError) as e:
        # ValueError: timestamps with impossible dates such as 2024-02-30
        logger.debug(f"Ignoring malformed frontmatter: {e}")
        return {}, text

    if data is None:
        data = {}
    if not isinstance(data, dict):
        logger.debug(f"Ignoring frontmatter of type {type(data).__name__}")
        return {}, text

    return data, text[match.end() :]
