"""Building blocks for a verified local model runtime: integrity, registry, inference settings and sandboxing."""

__version__ = "0.1.0"