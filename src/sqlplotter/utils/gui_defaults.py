"""Set up default classes and props for NiceGUI widgets used by the viewer."""

from __future__ import annotations

from nicegui import ui

from sqlplotter.utils.logging import get_logger

logger = get_logger(__name__)

_TAILWIND_TO_QUASAR = {
    "text-xs": "xs",
    "text-sm": "sm",
    "text-base": "md",
    "text-lg": "lg",
}


def setUpGuiDefaults(text_size: str = "text-sm") -> None:
    """Set up default classes and props for all ui elements.

    Args:
        text_size: Tailwind CSS text size class (e.g., 'text-xs', 'text-sm',
                   'text-base', 'text-lg').
    """
    text_size_quasar = _TAILWIND_TO_QUASAR[text_size]
    logger.debug(f'using classes text_size:"{text_size}" text_size_quasar:{text_size_quasar}')

    ui.label.default_classes(f"{text_size} select-text")
    ui.button.default_classes(text_size)
    ui.button.default_props("dense")
    ui.select.default_classes(text_size)
    ui.select.default_props("dense")
    ui.input.default_classes(text_size)
    ui.input.default_props("dense")
    ui.textarea.default_classes(text_size)
    ui.textarea.default_props("dense")
