"""Theme state manager: persisted light/dark/system preference.

The active palette is derived, never stored: explicit modes map straight to a
palette, system mode follows the device's color scheme at the moment of
asking. Device changes while in system mode re-notify listeners without any
call to set_mode. Persistence failures are logged and swallowed.
"""

from typing import Callable, Optional, Union

from eatmate.controllers.base import ScreenController
from eatmate.models.models import Palette, ThemeMode
from eatmate.storage.store import KeyValueStore

THEME_MODE_KEY = "themeMode"

LIGHT_PALETTE = Palette(
    name="light",
    background="#FFFFFF",
    text="#000000",
    primary="#4CAF50",
    secondary="#E8F5E9",
    card="#FFFFFF",
    border="#E0E0E0",
    notification="#FF9800",
    error="#F44336",
    success="#4CAF50",
    muted="#757575",
)

DARK_PALETTE = Palette(
    name="dark",
    background="#121212",
    text="#FFFFFF",
    primary="#81C784",
    secondary="#1B5E20",
    card="#1E1E1E",
    border="#333333",
    notification="#FFB74D",
    error="#EF5350",
    success="#66BB6A",
    muted="#BDBDBD",
)


class DeviceAppearance:
    """Live device color-scheme signal ("light", "dark" or None when unknown)."""

    def __init__(self, color_scheme: Optional[str] = None) -> None:
        self.color_scheme = color_scheme
        self._listeners: list[Callable[[Optional[str]], None]] = []

    def subscribe(self, listener: Callable[[Optional[str]], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, color_scheme: Optional[str]) -> None:
        if color_scheme == self.color_scheme:
            return
        self.color_scheme = color_scheme
        for listener in list(self._listeners):
            listener(color_scheme)


def resolve_palette(mode: ThemeMode, device_scheme: Optional[str]) -> Palette:
    if mode is ThemeMode.DARK:
        return DARK_PALETTE
    if mode is ThemeMode.LIGHT:
        return LIGHT_PALETTE
    return DARK_PALETTE if device_scheme == "dark" else LIGHT_PALETTE


class ThemeManager(ScreenController[Palette]):
    """Owns the theme mode for the whole app.

    Until ``load`` resolves, the mode is SYSTEM so the first paint follows the
    device; a persisted explicit mode then replaces it. Listeners receive the
    new palette whenever the active theme changes.
    """

    screen_name = "theme"

    def __init__(self, store: KeyValueStore, device: DeviceAppearance) -> None:
        super().__init__()
        self._store = store
        self._device = device
        self.mode = ThemeMode.SYSTEM
        self.loaded = False
        # Set once set_mode runs; a pending load must not override that choice
        self._mode_chosen = False
        self._unsubscribe_device = device.subscribe(self._on_device_change)

    def get_active_theme(self) -> Palette:
        return resolve_palette(self.mode, self._device.color_scheme)

    async def load(self) -> ThemeMode:
        """Apply the persisted mode; absent or unreadable keeps SYSTEM."""
        try:
            saved = await self._store.get_item(THEME_MODE_KEY)
        except Exception as e:
            self._log("warning", f"Error loading theme: {e}")
            saved = None

        before = self.get_active_theme()

        if self._mode_chosen:
            self._log("debug", "Keeping mode chosen while loading; stored value ignored")
        elif saved:
            try:
                self.mode = ThemeMode(saved)
            except ValueError:
                self._log("warning", f"Ignoring unknown stored theme mode {saved!r}")

        self.loaded = True
        self._log("debug", f"Theme mode loaded: {self.mode.value}")
        if self.get_active_theme() != before:
            self._notify(self.get_active_theme())
        return self.mode

    async def set_mode(self, mode: Union[ThemeMode, str]) -> None:
        """Apply ``mode`` immediately, then persist it.

        Raises:
            ValueError: If ``mode`` is not light, dark or system.
        """
        mode = ThemeMode(mode)
        self._mode_chosen = True
        self.mode = mode
        self._notify(self.get_active_theme())

        try:
            await self._store.set_item(THEME_MODE_KEY, mode.value)
        except Exception as e:
            self._log("warning", f"Error saving theme: {e}")

    def close(self) -> None:
        self._unsubscribe_device()
        super().close()

    def _on_device_change(self, color_scheme: Optional[str]) -> None:
        if self.mode is ThemeMode.SYSTEM:
            self._notify(self.get_active_theme())
