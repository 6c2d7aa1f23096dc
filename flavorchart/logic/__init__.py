"""Core chart logic.

Subpackages:
- classification: keyword category classifier
- normalization: tolerant coercion of stored / shared state
- sharing: share token codec
- selection: selection engine, row derivations and capability interfaces
"""
__all__ = ["classification", "normalization", "sharing", "selection"]
