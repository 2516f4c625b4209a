"""``{{nodeName.field}}`` variable references inside node configuration."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from flowbuilder.core.types import WorkflowNode

VARIABLE_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


@dataclass(frozen=True)
class VariableReference:
    """A parsed placeholder such as ``{{http.response.body}}``."""

    raw: str
    node_ref: str
    path: tuple[str, ...]


def extract_references(text: str) -> list[VariableReference]:
    """Return every placeholder in ``text`` in order of appearance."""
    references = []
    for match in VARIABLE_PATTERN.finditer(text):
        # Editors pad placeholders, so "{{ input.message }}" names node "input".
        node_ref, *path = (part.strip() for part in match.group(1).split("."))
        references.append(VariableReference(raw=match.group(0), node_ref=node_ref, path=tuple(path)))
    return references


def iter_message_contents(node: WorkflowNode) -> Iterator[str]:
    """Yield the string contents of an LLM node's messages.

    Messages are read from ``nodeConfig.messages`` first and from a
    top-level ``messages`` key (flattened template style) otherwise.
    Non-string contents (rich-text documents) are skipped.
    """
    messages = node.raw_config().get("messages")
    if not isinstance(messages, list):
        return

    for message in messages:
        if isinstance(message, dict):
            content = message.get("content")
        else:
            content = getattr(message, "content", None)
        if isinstance(content, str) and content:
            yield content
