"""Infrastructure layer: out-of-process collaborators (go, dot, viewer).

This layer depends on stdlib and third-party libs (Pydantic).
It must never import from domain, services, commands, or output.
The service layer bridges between domain rules and infrastructure.
"""
