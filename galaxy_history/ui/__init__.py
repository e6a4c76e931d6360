"""UI."""

from galaxy_history.ui.reporter import Reporter

__all__ = ["Reporter"]
