"""mlinstall — virtual-environment installer for a pinned ML application release."""

__version__ = "0.1.0"
