"""spacecube - map a local directory tree onto an S3-compatible bucket."""

__version__ = "0.1.0"
