from typing import NamedTuple, Optional, Sequence, Tuple

from skeptique.storage.models import Frame, Tone

# Ordem importa: o primeiro bucket que casar vence.
TONE_KEYWORDS: Sequence[Tuple[Tone, Tuple[str, ...]]] = (
    (Tone.alarmist, ("crisis", "threat", "danger", "urgent", "collapse")),
    (Tone.optimistic, ("breakthrough", "progress", "improve", "success")),
    (Tone.analytical, ("study", "analysis", "report", "data")),
)

FRAME_KEYWORDS: Sequence[Tuple[Frame, Tuple[str, ...]]] = (
    (Frame.political, ("law", "regulation", "policy", "government", "election")),
    (Frame.economic, ("economy", "market", "cost", "industry", "business")),
    (Frame.humanitarian, ("health", "civilian", "rights", "community")),
    (Frame.security, ("security", "defense", "cyber", "attack")),
)


class Labels(NamedTuple):
    tone: Tone
    frame: Frame


def _first_match(text: str, buckets, default):
    lowered = text.lower()
    for label, words in buckets:
        # substring, não palavra inteira ("reported" conta como "report")
        if any(w in lowered for w in words):
            return label
    return default


def infer_tone(text: Optional[str]) -> Tone:
    return _first_match(text or "", TONE_KEYWORDS, Tone.neutral)


def infer_frame(text: Optional[str]) -> Frame:
    return _first_match(text or "", FRAME_KEYWORDS, Frame.other)


def classify(text: Optional[str]) -> Labels:
    """Tom e enquadramento aproximados por palavras-chave. Nunca falha."""
    return Labels(tone=infer_tone(text), frame=infer_frame(text))
