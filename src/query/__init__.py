"""Query parameter validation and normalization.

A raw query string is parsed leniently, filtered through an allow-list schema of per-field
validator chains, checked against cross-field rules, and returned as an ordered `Params` container.
"""
