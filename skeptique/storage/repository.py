import json
import logging
import os
from typing import Dict, List, Optional

from skeptique.storage.models import Story, StorySummary

logger = logging.getLogger(__name__)

STORIES_PATH = os.path.join(os.path.dirname(__file__), "data", "stories.json")


class StoryRepository:
    """Stories seed, carregadas uma vez do JSON embutido (somente leitura)."""

    def __init__(self, stories: Dict[str, Story]):
        self._stories = stories

    @classmethod
    def from_file(cls, path: str = STORIES_PATH) -> "StoryRepository":
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        # aceita tanto {id: story} quanto [story, ...]
        items = raw.values() if isinstance(raw, dict) else raw
        stories = {}
        for item in items:
            story = Story.model_validate(item)
            stories[story.id] = story
        logger.info("Loaded %d seed stories from %s", len(stories), path)
        return cls(stories)

    def get(self, story_id: str) -> Optional[Story]:
        return self._stories.get(story_id)

    def list_summaries(self) -> List[StorySummary]:
        return [
            StorySummary(
                id=s.id,
                title=s.title,
                tags=s.tags,
                sources=s.sources_count,
                last_updated=s.last_updated,
            )
            for s in self._stories.values()
        ]

    def __len__(self) -> int:
        return len(self._stories)
