"""Application layer: DTOs, repository ports, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the repository ports.
"""
