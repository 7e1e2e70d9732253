"""Watch a Go source tree, rebuild on change, and keep the program running."""

__version__ = "0.3.0"
