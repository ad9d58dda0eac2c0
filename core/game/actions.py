"""Player action vocabulary."""

from enum import Enum


class PlayerAction(Enum):
    """Actions a player can submit on their turn."""

    HIT = "hit"
    STAND = "stand"
    DOUBLE_DOWN = "double_down"
    # Declared for the client vocabulary; the engine rejects it.
    SPLIT = "split"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, action: "PlayerAction | str") -> "PlayerAction":
        """
        Resolve an action name such as ``"double_down"`` to its member.

        Raises:
            ValueError: If the name is not a known action
        """
        if isinstance(action, cls):
            return action
        return cls(str(action).strip().lower())
