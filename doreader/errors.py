from __future__ import annotations

from typing import Any


class MissingEnvKeyError(KeyError):
    """Raised when ``Reader.ask_key`` cannot find the requested key in the environment."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(
            f"Environment key not found: {key!r}\n"
            f"Hint: Run with `{{'{key}': value}}` in the environment or wrap with `.with_env({{'{key}': value}})`"
        )


__all__ = ["MissingEnvKeyError"]
