"""FST building blocks: packed integers, a counting writer, merge iteration and UTF-8 byte ranges."""

__version__ = "0.1.0"