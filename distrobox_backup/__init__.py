"""Backup, restore, convert and delete Distrobox containers."""

from .__version__ import __version__

__all__ = ["__version__"]
