import hashlib
from typing import Iterable

from skeptique.storage.models import Article

_SEPARATOR = "|"


def fingerprint(articles: Iterable[Article]) -> str:
    """
    Chave de cache para um lote de artigos.
    Sensível à ordem: mesma lista ordenada -> mesmo hash.
    """
    joined = _SEPARATOR.join(f"{a.title}{a.source_name}" for a in articles)
    return hashlib.sha1(joined.encode("utf-8")).hexdigest()
