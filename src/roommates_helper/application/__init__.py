"""
Application Layer

Orchestrates domain objects and infrastructure ports to fulfil use cases.

Structure:
- interfaces/: Port interfaces for infrastructure adapters
- services/: The per-guild music queue and the registry that owns them
"""
