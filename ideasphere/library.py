"""JSON-backed idea library used by the desktop entry point.

The file lists ready-made idea sets keyed by topic::

    {
        "start": "Innovation",
        "topics": {
            "Innovation": [
                {"id": "i1", "phrase": "...", "category": "...", "description": "..."}
            ]
        }
    }

Recentering on a phrase simply looks the phrase up as a topic. Unknown topics
produce an empty list, which the view renders as a lone center node.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .model import Idea

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_LIBRARY_PATH", "IdeaLibrary"]

DEFAULT_LIBRARY_PATH = Path(__file__).resolve().parent / "data" / "sample_ideas.json"


def _parse_ideas(topic: str, entries: object) -> Tuple[Idea, ...]:
    if not isinstance(entries, list):
        raise ValueError(f"topic {topic!r}: expected a list of ideas")
    return tuple(Idea.from_mapping(entry, idx) for idx, entry in enumerate(entries))


@dataclass
class IdeaLibrary:
    topics: Dict[str, Tuple[Idea, ...]] = field(default_factory=dict)
    start: str = ""
    path: Optional[Path] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object], path: Optional[Path] = None) -> "IdeaLibrary":
        if not isinstance(payload, Mapping):
            raise ValueError("idea library must be a JSON object")
        raw_topics = payload.get("topics", {})
        if not isinstance(raw_topics, Mapping):
            raise ValueError("'topics' must map topic names to idea lists")
        topics = {str(name).strip(): _parse_ideas(str(name), entries) for name, entries in raw_topics.items()}
        start = str(payload.get("start") or "").strip()
        if not start and topics:
            start = next(iter(topics))
        return cls(topics=topics, start=start, path=path)

    @classmethod
    def load(cls, path: Union[str, Path, None] = None) -> "IdeaLibrary":
        path = Path(path) if path is not None else DEFAULT_LIBRARY_PATH
        if not path.exists():
            raise FileNotFoundError(f"Idea library not found: {path}")
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in idea library {path}: {exc}") from exc
        library = cls.from_mapping(payload, path)
        logger.info("Loaded %d topics from %s", len(library.topics), path)
        return library

    def names(self) -> List[str]:
        return list(self.topics)

    def ideas_for(self, topic: str) -> Tuple[Idea, ...]:
        key = (topic or "").strip()
        ideas = self.topics.get(key)
        if ideas is None:
            lowered = key.lower()
            ideas = next((v for k, v in self.topics.items() if k.lower() == lowered), None)
        if ideas is None:
            logger.warning("No ideas stored for topic %r", key)
            return ()
        return ideas
