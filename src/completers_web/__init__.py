"""Flask frontend for the completers engine: JSON API plus a small search page."""
from .web import app, complete_rows

__all__ = ["app", "complete_rows"]
