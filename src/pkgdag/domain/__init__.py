"""Domain layer: pure graph-visibility rules.

This layer depends only on stdlib and :mod:`pkgdag.errors`.
It must never import from services, infrastructure, commands, or config.
"""
