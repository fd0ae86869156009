"""Reference CPU kernels for neural-network operators, with tensor and platform helpers."""

__version__ = "0.5.0"