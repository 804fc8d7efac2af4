"""HTML rendering for validated documents."""
from resume_forge.render.html_renderer import TEMPLATE_NAMES, render

__all__ = ["render", "TEMPLATE_NAMES"]
