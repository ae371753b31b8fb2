"""
Boundary layer: external services behind the core interfaces.
"""
