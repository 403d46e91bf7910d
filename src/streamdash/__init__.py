"""streamdash: bounded-memory, frame-paced visualization of sample streams."""

from .core.models import ChartDimensions, ConfigurationError, FilterConfig, Sample
from .data.stream_buffer import BufferConfig, StreamBuffer
from .analysis.aggregate import aggregate_by_time
from .analysis.lttb import Downsampler, downsample_lttb
from .core.coordinates import CoordinateMapper
from .core.pipeline import FilterPipeline, Frame, FrameBuilder
from .core.scheduler import RenderScheduler, ThreadTickSource

__version__ = "0.1.0"

__all__ = [
    "BufferConfig",
    "ChartDimensions",
    "ConfigurationError",
    "CoordinateMapper",
    "Downsampler",
    "FilterConfig",
    "FilterPipeline",
    "Frame",
    "FrameBuilder",
    "RenderScheduler",
    "Sample",
    "StreamBuffer",
    "ThreadTickSource",
    "aggregate_by_time",
    "downsample_lttb",
]
