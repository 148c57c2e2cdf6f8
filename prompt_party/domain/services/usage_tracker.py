"""Tracks which content items a session has already shown."""

import logging
from typing import Optional

from ..entities.content import ContentKind
from ..entities.game_session import GameSession

logger = logging.getLogger(__name__)


class UsageTracker:
    """Per-session record of consumed content ids, one set per content kind.

    The sets live on the wrapped ``GameSession`` so they are persisted with it.
    The most recent id of each kind survives a reset.
    """

    def __init__(self, session: GameSession):
        self.session = session

    def mark_used(self, kind: ContentKind, content_id: int) -> None:
        self.session.used_content_ids.setdefault(kind, set()).add(content_id)
        self.session.last_used_ids[kind] = content_id

    def is_used(self, kind: ContentKind, content_id: int) -> bool:
        return content_id in self.session.used_content_ids.get(kind, ())

    def used_ids(self, kind: ContentKind) -> frozenset[int]:
        return frozenset(self.session.used_content_ids.get(kind, ()))

    def last_used(self, kind: ContentKind) -> Optional[int]:
        return self.session.last_used_ids.get(kind)

    def reset(self, kind: Optional[ContentKind] = None) -> None:
        """Clear usage for one content kind, or for every kind."""
        if kind is None:
            self.session.used_content_ids.clear()
            logger.info(f"Session {self.session.id}: cleared usage for all content")
        else:
            self.session.used_content_ids.pop(kind, None)
            logger.info(f"Session {self.session.id}: cleared usage for {kind.value}")
