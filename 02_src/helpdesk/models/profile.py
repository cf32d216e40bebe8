"""Per-conversation entity profile."""

from dataclasses import asdict, dataclass


@dataclass
class EntityProfile:
    """Issue category classified upstream plus the continuation flag.

    ``entity`` is written by the caller before a topic dialog runs and
    only read by topic steps. ``continuation`` stays True while a topic
    still expects further turns.
    """

    entity: str | None = None
    continuation: bool = True

    @property
    def category(self) -> str:
        """Normalized entity used for step matching ("" when unset)."""
        return normalize_category(self.entity)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "EntityProfile":
        return cls(
            entity=data.get("entity") or None,
            continuation=bool(data.get("continuation", True)),
        )


def normalize_category(value: str | None) -> str:
    """Lower-case, trimmed form of an entity or reply value."""
    return (value or "").strip().lower()
