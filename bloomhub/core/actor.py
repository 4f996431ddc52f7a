# bloomhub/core/actor.py
from dataclasses import dataclass, field
from typing import Any, Literal

ActorKind = Literal["customer", "florist", "admin"]


@dataclass(frozen=True)
class Actor:
    """
    Resolved identity behind a verified token.

    kind:
      - "customer": `record` is a users row
      - "florist":  `record` is a florist_auth row
      - "admin":    `record` is a configured OperatorAccount (no row)
    """

    kind: ActorKind
    subject: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    primary_role: str = "customer"
    record: Any = field(default=None, compare=False, repr=False)
