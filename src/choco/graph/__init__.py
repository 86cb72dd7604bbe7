"""Graph package - narrative graph construction and storage.

``read`` turns a document into a Guide (bookmark name -> node id) and a
Story (nodes hold bookmark text, edges hold choice text).
"""

from choco.graph.builder import (
    ChoiceRequest,
    DuplicateBookmark,
    NodePass,
    build,
    edge_pass,
    node_pass,
    read,
)
from choco.graph.errors import BookmarkNotFoundError, NodeNotFoundError, StoryLookupError
from choco.graph.story import ChoiceEdge, Guide, Story, bookmark_node

__all__ = [
    "BookmarkNotFoundError",
    "ChoiceEdge",
    "ChoiceRequest",
    "DuplicateBookmark",
    "Guide",
    "NodeNotFoundError",
    "NodePass",
    "Story",
    "StoryLookupError",
    "bookmark_node",
    "build",
    "edge_pass",
    "node_pass",
    "read",
]
