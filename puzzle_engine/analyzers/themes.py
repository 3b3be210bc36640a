"""Theme definitions and the catalog the theme analyzer reads from."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_THEMES_PATH = Path(__file__).parent / "data" / "themes.json"


class ThemeCategory(str, Enum):
    """Broad family a theme belongs to."""
    VISUAL = "visual"
    PLOT = "plot"
    TONE = "tone"
    SETTING = "setting"
    META = "meta"


class Theme(BaseModel):
    """A keyword-driven connection such as "Space Adventures"."""

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)

    id: str = Field(..., description="Unique theme identifier")
    name: str = Field(..., description="Connection label shown to players")
    category: ThemeCategory
    enabled: bool = True
    keywords: List[str] = Field(default_factory=list, description="Empty for special non-keyword themes")
    difficulty: int = Field(..., ge=1, le=4, description="1 is easiest, 4 hardest")
    description: str = ""
    title_only: bool = Field(False, alias="titleOnly", description="Search titles only, never synopses")


class ThemeCatalog:
    """An explicitly constructed set of themes with enable/disable switches.

    Build one at startup and pass it to the theme analyzer; nothing loads
    themes implicitly.
    """

    def __init__(self, themes: Iterable[Theme] = ()):
        self._themes: Dict[str, Theme] = {}
        for theme in themes:
            if theme.id in self._themes:
                logger.warning(f"Duplicate theme id '{theme.id}' ignored")
                continue
            self._themes[theme.id] = theme

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ThemeCatalog":
        """Load a catalog from a JSON file shaped like ``{"themes": [...]}``."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not load themes from {path}: {e}") from e

        themes = [Theme.model_validate(entry) for entry in data.get("themes", [])]
        logger.info(f"Loaded {len(themes)} themes from {path}")
        return cls(themes)

    @classmethod
    def default(cls) -> "ThemeCatalog":
        return cls.from_file(DEFAULT_THEMES_PATH)

    def get_all(self) -> List[Theme]:
        return list(self._themes.values())

    def get_enabled(self) -> List[Theme]:
        return [theme for theme in self._themes.values() if theme.enabled]

    def get_by_category(self, category: Union[ThemeCategory, str]) -> List[Theme]:
        category = ThemeCategory(category).value
        return [theme for theme in self._themes.values() if theme.category == category]

    def get(self, theme_id: str) -> Optional[Theme]:
        return self._themes.get(theme_id)

    def enable(self, theme_id: str) -> bool:
        return self._set_enabled(theme_id, True)

    def disable(self, theme_id: str) -> bool:
        return self._set_enabled(theme_id, False)

    def _set_enabled(self, theme_id: str, enabled: bool) -> bool:
        theme = self._themes.get(theme_id)
        if theme is None:
            return False
        self._themes[theme_id] = theme.model_copy(update={"enabled": enabled})
        return True

    def count(self) -> int:
        return len(self._themes)

    def enabled_count(self) -> int:
        return len(self.get_enabled())

    def has(self, theme_id: str) -> bool:
        return theme_id in self._themes
