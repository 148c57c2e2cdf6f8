"""Prompt pack unlock rules."""

import logging
from typing import Collection, Optional, Sequence

from ..entities.content import PromptPack, UnlockMetric
from ..entities.game_session import GameSession
from ..errors import UnknownPack

logger = logging.getLogger(__name__)


class UnlockEvaluator:
    """Stateless unlock rules.

    A pack is eligible once the session counter named by its unlock metric
    meets the pack's threshold, unless the session already unlocked it or the
    player dismissed it during this play-through.
    """

    @staticmethod
    def metric_value(session: GameSession, metric: UnlockMetric) -> int:
        return getattr(session, metric.value)

    def is_eligible(
        self, session: GameSession, pack: PromptPack, dismissed: Collection[int] = ()
    ) -> bool:
        if pack.id in session.unlocked_pack_ids or pack.id in dismissed:
            return False
        return self.metric_value(session, pack.unlock_metric) >= pack.unlock_threshold

    def check_for_unlockable_pack(
        self,
        session: GameSession,
        packs: Sequence[PromptPack],
        dismissed: Collection[int] = (),
    ) -> Optional[PromptPack]:
        """Return the first eligible pack in catalog order, if any."""
        for pack in packs:
            if self.is_eligible(session, pack, dismissed):
                return pack
        return None

    def confirm_unlock(
        self, session: GameSession, pack_id: int, packs: Sequence[PromptPack]
    ) -> PromptPack:
        """Add a pack to the session's unlocked set.

        Unlocking an already unlocked pack is a no-op.

        Raises:
            UnknownPack: If the pack id is not in the catalog.
        """
        pack = next((p for p in packs if p.id == pack_id), None)
        if pack is None:
            raise UnknownPack(pack_id)

        if pack_id not in session.unlocked_pack_ids:
            session.unlocked_pack_ids.add(pack_id)
            logger.info(f"Session {session.id}: unlocked pack {pack_id} ({pack.name})")
        return pack
