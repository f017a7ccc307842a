"""Keep derived context registries in sync with their source documents."""

__version__ = "0.1.0"
