"""Media streaming building blocks: byte buffers, FLV and MPEG-TS containers, configuration and file logging."""

__version__ = "0.1.0"