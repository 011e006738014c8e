# src/cdsearch/__init__.py

"""
cdsearch - Complement drug search on signed protein interaction networks.

This package provides tools to:
- Load signed interactions, drugs and essential proteins
- Propagate signed walks over bounded path lengths
- Resolve the net effect of each drug on essential proteins
- Score and rank drugs that complement an initial drug
"""
__all__ = []
