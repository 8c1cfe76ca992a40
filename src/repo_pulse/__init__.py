"""repo-pulse: GitHub repository analytics and health scoring."""

__version__ = "0.1.0"
