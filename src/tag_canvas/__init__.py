"""
Tag Canvas - an interactive canvas for drawing and editing tag areas over an image.

Built with PyQt6. Rectangles and polygons are drawn on a retained-mode scene
with pan, zoom, drag-to-create, hover, click and resize handles.
"""

__version__ = "1.0.0"
__author__ = "Tag Canvas Team"
