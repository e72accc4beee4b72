"""Theme preference (light/dark), defaulting to the host's preference."""
from .slots import SlotBackend, SlotKey

THEMES = ("light", "dark")


class Preferences:

    def __init__(self, slots: SlotBackend):
        self.slots = slots

    def theme(self, prefers_dark: bool = False) -> str:
        stored = self.slots.get(SlotKey.THEME)
        if stored in THEMES:
            return stored
        return "dark" if prefers_dark else "light"

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Invalid theme: {theme}")
        self.slots.set(SlotKey.THEME, theme)

    def toggle_theme(self, prefers_dark: bool = False) -> str:
        new = "light" if self.theme(prefers_dark) == "dark" else "dark"
        self.set_theme(new)
        return new
