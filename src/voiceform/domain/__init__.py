"""Domain layer — field registry, normalization, command classification.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
