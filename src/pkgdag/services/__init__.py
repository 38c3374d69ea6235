"""Service layer: classification and graph traversal.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
