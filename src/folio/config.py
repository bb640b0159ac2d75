"""Builder configuration.

BuilderConfig is a frozen dataclass: immutable after creation and shared
freely between builders that are combined with each other.
"""

from dataclasses import dataclass
from enum import Enum

from folio.errors import ConfigurationError


class ConflictPolicy(Enum):
    """How descriptors with the same key from different libraries resolve.

    - ``STRICT``: refuse the mutation that introduces the conflict.
    - ``FIRST_WINS``: keep the descriptor of the earliest-added library.
    - ``LAST_WINS``: keep the descriptor of the latest-added library.
    """

    STRICT = "strict"
    FIRST_WINS = "first-wins"
    LAST_WINS = "last-wins"

    @classmethod
    def parse(cls, value: "str | ConflictPolicy") -> "ConflictPolicy":
        """Accept an enum member or its CLI spelling (``first-wins``, ``LAST_WINS``)."""
        if isinstance(value, cls):
            return value
        normalised = str(value).strip().lower().replace("_", "-")
        for policy in cls:
            if policy.value == normalised:
                return policy
        choices = ", ".join(p.value for p in cls)
        msg = f"Unknown conflict policy {value!r}. Expected one of: {choices}"
        raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class BuilderConfig:
    """Application builder configuration. Immutable after creation.

    Override what you need::

        config = BuilderConfig(conflict_policy=ConflictPolicy.LAST_WINS)
    """

    conflict_policy: ConflictPolicy = ConflictPolicy.STRICT

    def __post_init__(self) -> None:
        if not isinstance(self.conflict_policy, ConflictPolicy):
            # Frozen dataclass: bypass __setattr__ to store the parsed member
            object.__setattr__(self, "conflict_policy", ConflictPolicy.parse(self.conflict_policy))
