"""
Caller-owned RGBA pixel storage.
"""

from typing import Union

import numpy as np

BYTES_PER_PIXEL = 4


class PixelBuffer:
    """
    Row-major RGBA byte buffer with a stride of ``width * 4``.

    The renderers only ever write into ``pixels``; allocation and lifetime
    belong to whoever created the buffer.
    """

    def __init__(self, width: int, height: int, pixels: np.ndarray = None):
        """
        Initialize the buffer.

        Args:
            width, height: Dimensions in pixels
            pixels: Existing uint8 array of shape (height, width, 4); a zeroed
                array is allocated when omitted
        """
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive")

        if pixels is None:
            pixels = np.zeros((height, width, BYTES_PER_PIXEL), dtype=np.uint8)
        elif pixels.dtype != np.uint8 or pixels.shape != (height, width, BYTES_PER_PIXEL):
            raise ValueError(f"Expected uint8 array of shape {(height, width, BYTES_PER_PIXEL)}, "
                             f"got {pixels.dtype} {pixels.shape}")
        if not pixels.flags.writeable:
            raise ValueError("Pixel storage must be writable")
        if not pixels.flags.c_contiguous:
            raise ValueError("Pixel storage must be C-contiguous")

        self.width = width
        self.height = height
        self.pixels = pixels

    @classmethod
    def wrap(cls, storage: Union[bytearray, memoryview, np.ndarray],
             width: int, height: int) -> 'PixelBuffer':
        """Create a buffer over existing memory without copying it."""
        if isinstance(storage, np.ndarray):
            if not storage.flags.c_contiguous:
                raise ValueError("Pixel storage must be C-contiguous")
            flat = storage.reshape(-1).view(np.uint8)
        else:
            flat = np.frombuffer(storage, dtype=np.uint8)
        expected = width * height * BYTES_PER_PIXEL
        if flat.size != expected:
            raise ValueError(f"Storage holds {flat.size} bytes, expected {expected}")
        return cls(width, height, flat.reshape(height, width, BYTES_PER_PIXEL))

    @property
    def stride(self) -> int:
        return self.width * BYTES_PER_PIXEL

    @property
    def shape(self):
        return self.pixels.shape

    def rgb(self) -> np.ndarray:
        """View of the color channels without alpha."""
        return self.pixels[:, :, :3]

    def to_bytes(self) -> bytes:
        return self.pixels.tobytes()

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height})"
