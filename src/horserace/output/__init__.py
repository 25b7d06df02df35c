"""Output formatting and export."""

from .console import ConsoleOutput, ConsoleRenderer, Renderer, format_frame, format_lane
from .export import Exporter, load_race, save_race

__all__ = [
    "ConsoleOutput",
    "ConsoleRenderer",
    "Exporter",
    "Renderer",
    "format_frame",
    "format_lane",
    "load_race",
    "save_race",
]
