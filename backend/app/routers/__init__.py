"""Router modules for the flow viewer backend."""

from . import files, images, tests

__all__ = ["files", "images", "tests"]
