"""Synthetic data generators."""

from rwa_ledger.generators.property import PropertyDraft, PropertyGenerator

__all__ = ["PropertyDraft", "PropertyGenerator"]
