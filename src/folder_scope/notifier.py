"""Present classification outcomes to the user."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol

from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import NotificationMode, ScopeConfig
from .models import Action, Diagnostic, Folder, MessageLevel


class Presenter(Protocol):
    """A presentation surface the notifier can drive."""

    def show_enabled(self, folder: Folder, count: int, limit: int, text: str) -> None:
        ...

    def show_disabled(self, folder: Folder, count: int, limit: int, text: str) -> None:
        ...

    def clear(self) -> None:
        ...


def enabled_text(folder: Folder, count: int, limit: int) -> str:
    return (
        f"Pylance enabled for '{folder.name}'. Scope: include Python in configured directories. "
        f"Analysing {count} files (limit {limit})."
    )


def disabled_text(folder: Folder, count: int, limit: int) -> str:
    return f"Pylance disabled for '{folder.name}'. {count} Python files exceed the {limit} limit."


class ToastPresenter:
    """Transient messages printed to the console."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True)

    def show_enabled(self, folder: Folder, count: int, limit: int, text: str) -> None:
        self.console.print(f"[cyan]INFO:[/cyan] {text}")

    def show_disabled(self, folder: Folder, count: int, limit: int, text: str) -> None:
        self.console.print(f"[yellow]WARNING:[/yellow] {text}")

    def clear(self) -> None:
        pass


class StatusBarPresenter:
    """Single shared indicator; the most recent folder wins.

    With a console the label is printed every time it changes.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console
        self.text = ""
        self.tooltip = ""

    def show_enabled(self, folder: Folder, count: int, limit: int, text: str) -> None:
        self._set(f"Pylance enabled ({count}/{limit})", text)

    def show_disabled(self, folder: Folder, count: int, limit: int, text: str) -> None:
        self._set(f"Pylance disabled: {count} > {limit}", text)

    def _set(self, label: str, text: str) -> None:
        self.text = label
        self.tooltip = text + "\nClick to open settings."
        if self.console is not None:
            self.render(self.console)

    def render(self, console: Console) -> None:
        if self.text:
            console.print(f"[bold]{self.text}[/bold]", highlight=False)
            console.print(self.tooltip, markup=False, highlight=False)

    def clear(self) -> None:
        self.text = ""
        self.tooltip = ""


class ProblemsPresenter:
    """One diagnostic per folder, attached to the folder's settings file.

    With a console the whole table is printed on every update.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console
        self.diagnostics: Dict[Path, Diagnostic] = {}

    def show_enabled(self, folder: Folder, count: int, limit: int, text: str) -> None:
        self._set(folder, Diagnostic(text, MessageLevel.INFO))

    def show_disabled(self, folder: Folder, count: int, limit: int, text: str) -> None:
        self._set(folder, Diagnostic(text, MessageLevel.WARNING))

    def _set(self, folder: Folder, diagnostic: Diagnostic) -> None:
        self.diagnostics[folder.settings_path] = diagnostic
        if self.console is not None:
            self.console.print(self.render())

    def clear(self) -> None:
        self.diagnostics.clear()

    def render(self) -> Table:
        table = Table(title="Folder scope problems")
        table.add_column("Location")
        table.add_column("Severity")
        table.add_column("Message")
        for location, diagnostic in sorted(self.diagnostics.items()):
            table.add_row(str(location), diagnostic.level.value, diagnostic.message)
        return table


class Notifier:
    """Dispatch outcomes to the surface selected by ``notification_mode``.

    Toasts are throttled per folder; the throttle map lives in memory only.
    """

    def __init__(
        self,
        toast: Optional[Presenter] = None,
        statusbar: Optional[Presenter] = None,
        problems: Optional[Presenter] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.toast = toast or ToastPresenter()
        self.statusbar = statusbar or StatusBarPresenter()
        self.problems = problems or ProblemsPresenter()
        self._clock = clock
        self._last_toast_at: Dict[str, float] = {}

    def prepare(self, mode: NotificationMode) -> None:
        """Clear surfaces that the new mode no longer uses."""

        if mode != NotificationMode.STATUSBAR:
            self.statusbar.clear()
        if mode != NotificationMode.PROBLEMS:
            self.problems.clear()

    def notify(self, folder: Folder, action: Action, count: int, limit: int, config: ScopeConfig) -> None:
        try:
            self._notify(folder, action, count, limit, config)
        except Exception:
            logger.exception("Failed to present outcome for folder '{}'", folder.name)

    def _notify(self, folder: Folder, action: Action, count: int, limit: int, config: ScopeConfig) -> None:
        mode = config.notification_mode
        if mode == NotificationMode.NONE:
            return

        if action == Action.DISABLE:
            text = disabled_text(folder, count, limit)
        else:
            text = enabled_text(folder, count, limit)

        if mode == NotificationMode.STATUSBAR:
            self._show(self.statusbar, folder, action, count, limit, text)
            return

        if mode == NotificationMode.PROBLEMS:
            self._show(self.problems, folder, action, count, limit, text)
            return

        now = self._clock()
        last = self._last_toast_at.get(folder.key)
        window = config.toast_suppress_for_minutes * 60
        if last is not None and now - last < window:
            logger.debug("Toast for folder '{}' suppressed", folder.name)
            return

        if action == Action.DISABLE and not config.show_disable_toast:
            return
        if action == Action.ENABLE and not config.show_enable_toast:
            return
        self._show(self.toast, folder, action, count, limit, text)
        self._last_toast_at[folder.key] = now

    @staticmethod
    def _show(presenter: Presenter, folder: Folder, action: Action, count: int, limit: int, text: str) -> None:
        if action == Action.DISABLE:
            presenter.show_disabled(folder, count, limit, text)
        else:
            presenter.show_enabled(folder, count, limit, text)

    def clear(self) -> None:
        for presenter in (self.toast, self.statusbar, self.problems):
            try:
                presenter.clear()
            except Exception:
                logger.exception("Failed to clear presenter {}", type(presenter).__name__)


__all__ = [
    "Presenter",
    "ToastPresenter",
    "StatusBarPresenter",
    "ProblemsPresenter",
    "Notifier",
    "enabled_text",
    "disabled_text",
]
