"""Error taxonomy of the game progression engine."""


class GameError(Exception):
    """Base class for game engine errors."""


class InitializationFailed(GameError):
    """The content repository could not be reached while starting a game."""


class NoContentAvailable(GameError):
    """The content repository has no item at all for the requested filter."""

    def __init__(self, kind, level=None, intensity=None):
        self.kind = kind
        self.level = level
        self.intensity = intensity
        super().__init__(
            f"No {kind.value} content available "
            f"(level={level}, intensity={intensity})"
        )


class UnknownPack(GameError, ValueError):
    """A pack id that is not in the repository's pack catalog."""

    def __init__(self, pack_id: int):
        self.pack_id = pack_id
        super().__init__(f"Prompt pack with id {pack_id} not found")


class InvalidTransition(GameError, ValueError):
    """An action value outside its allowed range."""


class RepositoryUnavailable(GameError, ConnectionError):
    """A storage backend could not be reached."""
