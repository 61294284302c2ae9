from __future__ import annotations

from typing import Mapping, Protocol


class SettingsRepository(Protocol):
    def get_all(self) -> Mapping[str, str]:
        """Raw key/value pairs as stored; unknown keys are ignored by the provider."""

        raise NotImplementedError
