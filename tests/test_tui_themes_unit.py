import unittest

from core.desktop.devtools.interface.tui_themes import DEFAULT_THEME, THEMES, build_style, get_theme_palette
from core.status import TaskStatus

REQUIRED_KEYS = {
    "",
    "text",
    "text.dim",
    "selected",
    "marked",
    "statusbar",
    "statusbar.stale",
    "footer.key",
    "dialog",
    "dialog.button.focused",
    "progress.bar",
    "notify.cancelled",
    "notify.error",
}


class ThemeTests(unittest.TestCase):
    def test_all_themes_have_required_keys(self):
        for name in THEMES.keys():
            palette = get_theme_palette(name)
            missing = REQUIRED_KEYS - set(palette.keys())
            self.assertFalse(missing, f"theme {name} missing {missing}")

    def test_every_status_has_a_style(self):
        palette = get_theme_palette(DEFAULT_THEME)
        for status in TaskStatus:
            self.assertIn(status.style, palette)

    def test_unknown_theme_falls_back_to_default(self):
        palette_default = get_theme_palette(DEFAULT_THEME)
        palette_unknown = get_theme_palette("non-existent")
        self.assertEqual(palette_unknown, palette_default)
        self.assertIsNot(palette_unknown, palette_default)

    def test_style_builds_without_errors(self):
        for name in THEMES:
            style = build_style(name)
            self.assertTrue(getattr(style, "style_rules", None))


if __name__ == "__main__":
    unittest.main()
