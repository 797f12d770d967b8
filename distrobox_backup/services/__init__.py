"""Building blocks for the workflows: commands, listing, classification.

Main Classes:
    - CommandRunner: run one external command, capture combined output
    - ContainerRegistry: list containers from ``distrobox-list``
    - HomeClassifier: isolated vs standard from filesystem evidence
    - TempImageManager: unique temporary image names and cleanup
    - Toolchain: fixed-shape runtime and distrobox commands
"""

from .command_runner import CommandRunner, command_exists
from .dependencies import detect_tool_config
from .homes import HomeClassifier
from .registry import ContainerRegistry, parse_container_list
from .temp_images import TempImageManager
from .toolchain import Toolchain, extract_loaded_image

__all__ = [
    "CommandRunner",
    "ContainerRegistry",
    "HomeClassifier",
    "TempImageManager",
    "Toolchain",
    "command_exists",
    "detect_tool_config",
    "extract_loaded_image",
    "parse_container_list",
]
