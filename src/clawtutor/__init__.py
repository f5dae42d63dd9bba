"""clawtutor - terminal front-end for AI coding-agent CLIs."""

__version__ = "0.3.0"
