"""Atlassian Document Format (ADF) codec.

Jira Cloud stores long-form fields (descriptions, comments) as nested ADF
documents. Outgoing text is always wrapped as a single paragraph holding a
single text node; incoming documents are flattened paragraph by paragraph.
"""

from typing import Any

NO_DESCRIPTION = "No description"


def encode(text: str) -> dict[str, Any]:
    """Wrap plain text as a one-paragraph ADF document.

    The text is stored literally; no markup is interpreted.
    """
    return {
        "type": "doc",
        "version": 1,
        "content": [
            {
                "type": "paragraph",
                "content": [{"type": "text", "text": text}],
            }
        ],
    }


def decode(value: Any) -> str:
    """Extract plain text from an ADF document (or pass a string through).

    Text nodes of every top-level paragraph are concatenated, paragraphs are
    joined with newlines, and trailing whitespace is removed. Anything that
    yields no text, including ``None`` and unexpected shapes, becomes
    ``"No description"``.
    """
    if isinstance(value, str):
        return value or NO_DESCRIPTION
    if not isinstance(value, dict) or value.get("type") != "doc":
        return NO_DESCRIPTION

    content = value.get("content")
    if not isinstance(content, list):
        return NO_DESCRIPTION

    paragraphs = []
    for block in content:
        if not isinstance(block, dict) or block.get("type") != "paragraph":
            continue
        children = block.get("content")
        if not isinstance(children, list):
            continue
        paragraphs.append(
            "".join(
                str(node.get("text") or "")
                for node in children
                if isinstance(node, dict) and node.get("type") == "text"
            )
        )

    text = "\n".join(paragraphs).rstrip()
    return text or NO_DESCRIPTION
