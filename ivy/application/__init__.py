"""
Application layer: services orchestrating core logic and boundaries.
"""
