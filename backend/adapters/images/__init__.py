# Image Adapters
# Unsplash integration

from .unsplash_adapter import UnsplashAdapter, UnsplashError

__all__ = [
    "UnsplashAdapter",
    "UnsplashError",
]
