"""sectionist: modular document composition for multi-step post authoring."""

__version__ = "0.1.0"
