"""Collapsible markdown history of the chunks used to rebuild objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._chunks import Chunk


COLLAPSE_BUTTON = '<button class="scbook-collapse">View history</button>'
COLLAPSE_CONTENT = '<div class="scbook-content">'


def render_transcript(chunks: Mapping[str, Chunk]) -> str:
    """Render the code of `chunks` as a collapsible markdown code block.

    Each chunk is introduced by a `#--- <name> ---#` comment.
    """
    sections = [
        "\n".join([f"#--- {name} ---#", *chunk.body])
        for name, chunk in chunks.items()
    ]
    return "\n".join([
        COLLAPSE_BUTTON,
        COLLAPSE_CONTENT,
        "",
        "```python",
        "\n\n".join(sections),
        "```",
        "",
        "</div>",
        "",
    ])
