"""
Core domain: loan models, header resolution, row normalization and
denomination tiers.
"""
