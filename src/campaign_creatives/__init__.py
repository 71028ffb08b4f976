"""Campaign creatives: product images composited with campaign messaging for every aspect ratio."""

__version__ = "0.1.0"
