"""kasmctl — command-line tool for managing Kasm Workspaces."""

__version__ = "0.1.0"
