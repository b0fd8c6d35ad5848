"""Image transformation builders.

Exports
-------
ImageTransformer / AsyncImageTransformer
    Fluent, validating builders that turn transform options into a
    rendered image URL or image bytes.
"""

from .transformer import AsyncImageTransformer, ImageTransformer

__all__ = [
    "AsyncImageTransformer",
    "ImageTransformer",
]
