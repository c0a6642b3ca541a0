"""YAML front matter utilities for Markdown/MDX content.

Content files open with a '---' delimited YAML block followed by the body:

    ---
    title: Rust Ownership
    description: Borrowing without tears
    date: 2024-01-15
    draft: false
    ---
    # Rust Ownership

    The borrow checker...
"""

import re
from typing import Any

import yaml


DELIMITER = "---"

_FRONT_MATTER_PATTERN = re.compile(
    rf"^{re.escape(DELIMITER)}[ \t]*\r?\n(.*?)\r?\n?{re.escape(DELIMITER)}[ \t]*(?:\r?\n|$)",
    re.DOTALL,
)


def parse_front_matter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML front matter from Markdown content.

    Args:
        content: Full file content including front matter

    Returns:
        Tuple of (front_matter_dict, body)
        If no front matter is found, or it is not a valid YAML mapping,
        returns (empty dict, original content)

    Raises:
        ValueError: Well-formed YAML whose values cannot be constructed,
            e.g. a calendar-invalid ``date: 2024-13-45``

    Example:
        >>> metadata, body = parse_front_matter("---\\ntitle: Hello\\n---\\n# Body")
        >>> metadata["title"]
        'Hello'
        >>> body
        '# Body'
    """
    text = content.lstrip("\ufeff")
    match = _FRONT_MATTER_PATTERN.match(text)

    if not match:
        return {}, content

    yaml_text = match.group(1)
    body = text[match.end() :]

    try:
        metadata = yaml.safe_load(yaml_text) or {}
    except yaml.YAMLError:
        return {}, content

    if not isinstance(metadata, dict):
        return {}, content

    return metadata, body

