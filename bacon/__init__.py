"""Job references, missions, styled terminal lines, reports, wrapping, search and file watching for a background code checker."""

__version__ = "0.1.0"