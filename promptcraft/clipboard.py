"""Copy-to-clipboard affordance for generated and templated text."""

from __future__ import annotations

import logging

import pyperclip

logger = logging.getLogger("promptcraft.clipboard")


def copy_to_clipboard(text: str) -> bool:
    """Copy ``text`` to the system clipboard; False if no clipboard is available."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        logger.warning("Clipboard unavailable: %s", exc)
        return False
    return True
