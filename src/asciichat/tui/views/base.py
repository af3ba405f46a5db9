from abc import ABC, abstractmethod
from typing import Iterable
from textual.widget import Widget
from asciichat.tui.state import State


class View(ABC):
    name: str

    @abstractmethod
    def render(self, state: State) -> Iterable[Widget]: ...

    def update(self, root: Widget, state: State) -> None:
        """Refresh already-mounted widgets under `root` in place."""
        pass
