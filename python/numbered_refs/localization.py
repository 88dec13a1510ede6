from typing import Dict, List, Mapping, Optional, Protocol, runtime_checkable

from numbered_refs import Node, words
from numbered_refs.config import FIGURE_PREFIX_KEY, TABLE_PREFIX_KEY

DEFAULT_TRANSLATIONS: Mapping[str, str] = {
    FIGURE_PREFIX_KEY: "Figure {0}:",
    TABLE_PREFIX_KEY: "Table {0}:",
}


@runtime_checkable
class Localization(Protocol):
    """Renders a translated message taking a count, e.g. "Figure 3:".

    Implementations must always return something usable: the numbering code does not handle missing translations.
    """

    def render(self, key: str, count: int) -> List[Node]: ...


class TemplateLocalization:
    """Translations as `str.format` templates, where `{0}` is the count."""

    translations: Dict[str, str]

    def __init__(self, translations: Optional[Mapping[str, str]] = None) -> None:
        self.translations = dict(DEFAULT_TRANSLATIONS)
        if translations:
            self.translations.update(translations)

    def render(self, key: str, count: int) -> List[Node]:
        if key not in self.translations:
            raise KeyError(f"No translation for '{key}'")
        return words(self.translations[key].format(count))
