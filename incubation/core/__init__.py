"""Core cross-cutting pieces: exception taxonomy and bounded storage calls."""
