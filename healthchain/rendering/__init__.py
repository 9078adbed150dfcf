"""
==============================================================================
Rendering Package
==============================================================================

Jinja2 templates for the card fragments and the full dashboard page.

==============================================================================
"""

from . import cards
from .page import DashboardView, render_dashboard
from .templates import templates

__all__ = ["cards", "DashboardView", "render_dashboard", "templates"]
