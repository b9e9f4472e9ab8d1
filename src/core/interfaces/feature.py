"""Contract for optional server features (authorization, plugins).

Why Protocol:
- Structural contract (duck typing) without a rigid base class.
- The provisioning flow only needs to ask each feature whether the running
  server supports it, then set it up and validate it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ServerFeature(Protocol):
    """Minimum contract for a feature the provisioning run can enable."""

    name: str

    def supported(self) -> bool:
        """True when the running server version (and config) allows the feature."""

        ...

    def setup(self) -> None:
        ...

    def validate(self) -> None:
        """Raise when the feature is not in the expected state."""

        ...
