from abc import ABC, abstractmethod
from typing import List

from skeptique.storage.models import Article
from skeptique.utils.result import Result


class BaseFeed(ABC):
    @abstractmethod
    def fetch(self, topic: str) -> Result[List[Article]]:
        pass
