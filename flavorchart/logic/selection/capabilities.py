"""
Capability interfaces injected at the engine boundary.

The engine never touches storage, the page URL, the clipboard or a modal
dialog directly; callers hand in objects implementing these protocols so that
headless code and tests can answer deterministically.
"""
from typing import Dict, Optional, Protocol


class Storage(Protocol):
    """Key/value store holding JSON text (the browser localStorage contract)."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class LinkContext(Protocol):
    """Query parameters of the current link."""

    def read_param(self, name: str) -> Optional[str]:
        ...

    def write_param(self, name: str, value: Optional[str]) -> None:
        ...


class Confirmer(Protocol):
    def confirm(self, message: str) -> bool:
        ...


class Clipboard(Protocol):
    def copy(self, text: str) -> None:
        """Copy text; raises OSError when the platform refuses."""
        ...


class QueryParams:
    """LinkContext over a plain dict (request query params, CLI flags, tests)."""

    def __init__(self, params: Optional[Dict[str, str]] = None):
        self.params: Dict[str, str] = dict(params or {})

    def read_param(self, name: str) -> Optional[str]:
        return self.params.get(name)

    def write_param(self, name: str, value: Optional[str]) -> None:
        if value is None:
            self.params.pop(name, None)
        else:
            self.params[name] = value


class FixedAnswer:
    """Confirmer that always gives the same answer and remembers what it was asked."""

    def __init__(self, answer: bool):
        self.answer = answer
        self.asked: list = []

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        return self.answer
