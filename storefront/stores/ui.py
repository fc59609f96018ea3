"""Transient UI flags: mobile menu, search, filter drawer, active modal."""
from dataclasses import dataclass, replace
from collections.abc import Mapping
from typing import Any, Optional

from .base import Store


@dataclass(frozen=True)
class UIState:
    is_mobile_menu_open: bool = False
    is_search_open: bool = False
    is_filter_drawer_open: bool = False
    active_modal: Optional[str] = None


def _open_modal(state: UIState, event: Mapping[str, Any]) -> UIState:
    modal_id = event.get("modalId")
    return replace(state, active_modal=str(modal_id) if modal_id is not None else None)


class UIStore(Store[UIState]):
    """Overlay state for navigation components. Nothing here is persisted."""

    name = "ui"

    def __init__(self):
        super().__init__(
            UIState(),
            {
                "toggleMobileMenu": lambda s, _: replace(s, is_mobile_menu_open=not s.is_mobile_menu_open),
                "openMobileMenu": lambda s, _: replace(s, is_mobile_menu_open=True),
                "closeMobileMenu": lambda s, _: replace(s, is_mobile_menu_open=False),
                "toggleSearch": lambda s, _: replace(s, is_search_open=not s.is_search_open),
                "openSearch": lambda s, _: replace(s, is_search_open=True),
                "closeSearch": lambda s, _: replace(s, is_search_open=False),
                "toggleFilterDrawer": lambda s, _: replace(s, is_filter_drawer_open=not s.is_filter_drawer_open),
                "openFilterDrawer": lambda s, _: replace(s, is_filter_drawer_open=True),
                "closeFilterDrawer": lambda s, _: replace(s, is_filter_drawer_open=False),
                "openModal": _open_modal,
                "closeModal": lambda s, _: replace(s, active_modal=None),
                "closeAll": lambda s, _: UIState(),
            },
        )

    def toggle_mobile_menu(self) -> UIState:
        return self.send({"type": "toggleMobileMenu"})

    def open_mobile_menu(self) -> UIState:
        return self.send({"type": "openMobileMenu"})

    def close_mobile_menu(self) -> UIState:
        return self.send({"type": "closeMobileMenu"})

    def toggle_search(self) -> UIState:
        return self.send({"type": "toggleSearch"})

    def open_search(self) -> UIState:
        return self.send({"type": "openSearch"})

    def close_search(self) -> UIState:
        return self.send({"type": "closeSearch"})

    def toggle_filter_drawer(self) -> UIState:
        return self.send({"type": "toggleFilterDrawer"})

    def open_filter_drawer(self) -> UIState:
        return self.send({"type": "openFilterDrawer"})

    def close_filter_drawer(self) -> UIState:
        return self.send({"type": "closeFilterDrawer"})

    def open_modal(self, modal_id: str) -> UIState:
        """Make modal_id the active modal, replacing any other."""
        return self.send({"type": "openModal", "modalId": modal_id})

    def close_modal(self) -> UIState:
        return self.send({"type": "closeModal"})

    def close_all(self) -> UIState:
        return self.send({"type": "closeAll"})
