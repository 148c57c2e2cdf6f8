"""Content repository protocol."""

from typing import Iterable, Protocol, runtime_checkable

from ..entities.content import ActivityBreak, Challenge, Prompt, PromptPack, ReflectionPause


@runtime_checkable
class ContentRepository(Protocol):
    """Protocol for content stores.

    Implementations return empty lists when nothing matches and raise
    ``RepositoryUnavailable`` only when the backend cannot be reached.
    """

    def get_prompts(
        self, level: int, intensity: int, exclude_ids: Iterable[int] = ()
    ) -> list[Prompt]:
        """Retrieve prompts for a level and intensity.

        Args:
            level: Prompt depth tier (1-3).
            intensity: Prompt intensity tier (1-3).
            exclude_ids: Prompt ids to leave out of the result.

        Returns:
            list[Prompt]: Matching prompts, possibly empty.
        """
        ...

    def get_challenges(
        self, intensity: int, exclude_ids: Iterable[int] = ()
    ) -> list[Challenge]:
        """Retrieve challenges for an intensity.

        Args:
            intensity: Challenge intensity tier (1-3).
            exclude_ids: Challenge ids to leave out of the result.

        Returns:
            list[Challenge]: Matching challenges, possibly empty.
        """
        ...

    def get_activity_breaks(self) -> list[ActivityBreak]:
        """Retrieve all activity breaks."""
        ...

    def get_reflection_pauses(self) -> list[ReflectionPause]:
        """Retrieve all reflection pauses."""
        ...

    def get_packs(self) -> list[PromptPack]:
        """Retrieve the prompt pack catalog in display order."""
        ...
