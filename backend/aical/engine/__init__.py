"""AI Cal rendering engine: a stateless transform from (image, analysis, layout, mode) to pixels."""

from aical.engine.collage import CollageFile, compose_collage, create_collage
from aical.engine.errors import CollageTimeoutError, EngineError, ImageDecodeError, NoContextError
from aical.engine.export import render_final
from aical.engine.layout import apply_collage_overrides, init_layout
from aical.engine.scene import draw_scene, render_scene
from aical.engine.surface import PillowSurface, Surface

__all__ = [
    "CollageFile",
    "CollageTimeoutError",
    "EngineError",
    "ImageDecodeError",
    "NoContextError",
    "PillowSurface",
    "Surface",
    "apply_collage_overrides",
    "compose_collage",
    "create_collage",
    "draw_scene",
    "init_layout",
    "render_final",
    "render_scene",
]
