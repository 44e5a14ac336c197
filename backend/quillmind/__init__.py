"""QuillMind backend: intent routing, resilient vector retrieval and diff synthesis."""

__version__ = "0.1.0"
