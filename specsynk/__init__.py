"""SpecSynk: a timed product-manager interview that drafts a product spec."""

__version__ = "0.1.0"
