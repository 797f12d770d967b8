from .menu import MainMenu
from .prompts import ConsolePrompts, Prompts
from .spinner import ProgressIndicator, spinner_factory

__all__ = [
    "ConsolePrompts",
    "MainMenu",
    "ProgressIndicator",
    "Prompts",
    "spinner_factory",
]
