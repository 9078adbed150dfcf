"""
==============================================================================
Template Environment
==============================================================================

Jinja2 environment shared by the page routes and the card fragments.
Autoescaping is on for every template.

==============================================================================
"""

from pathlib import Path

from fastapi.templating import Jinja2Templates
from jinja2 import Environment, FileSystemLoader


TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)

templates = Jinja2Templates(env=env)
