"""
CineFind: movie discovery over a remote catalog with search analytics.
"""
