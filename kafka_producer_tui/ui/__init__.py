"""
Terminal user interface: interaction state, rendering and the Textual app.
"""

from .model import InteractionState, View
from .render import render

__all__ = ["InteractionState", "View", "render"]
