"""Coverage decoration rendering."""

from gutterwatch.render.renderer import Renderer

__all__ = ["Renderer"]
