"""
Module: export.images

Purpose:
    Pixel operations used during page assembly: band cropping, alpha
    flattening and DPI resampling.
"""

from .cropper import crop_band, flatten, resample_to_dpi, target_size_for_dpi

__all__ = [
    "crop_band",
    "flatten",
    "resample_to_dpi",
    "target_size_for_dpi",
]
