"""bore-cli - installs and launches the bore tunnelling client."""

__version__ = "0.4.1"

__all__ = ["__version__"]
