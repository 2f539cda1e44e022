"""Topic coverage: which survey topics the bot has already raised."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Topic:
    id: str
    label: str
    keywords: tuple[str, ...] = field(default_factory=tuple)
    description: str = ""


def covered_topics(assistant_texts: list[str], topics: list[Topic]) -> list[str]:
    """Return ids of topics whose keywords appear in any assistant message.

    Matching is case-insensitive substring matching; order follows ``topics``.
    """
    corpus = "\n".join(assistant_texts).lower()
    return [
        topic.id
        for topic in topics
        if any(keyword.lower() in corpus for keyword in topic.keywords)
    ]
