"""Shape-preserving downsampling of large time-series."""

# Re-export commonly used modules for convenience.
from . import downsampler, lttb, minmax, minmaxlttb
from .downsampler import (
    LTTBDownsampler,
    MinMaxDownsampler,
    MinMaxLTTBDownsampler,
    downsample_xy,
)

__all__ = [
    "downsampler",
    "lttb",
    "minmax",
    "minmaxlttb",
    "LTTBDownsampler",
    "MinMaxDownsampler",
    "MinMaxLTTBDownsampler",
    "downsample_xy",
]
