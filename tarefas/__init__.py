"""Tasks+ - personal tasks with public sharing and comments."""

__version__ = "1.0.0"
