"""roundpack: pack brain-dumped tasks into fixed-length work rounds."""

from roundpack.config import VERSION as __version__

__all__ = ["__version__"]
