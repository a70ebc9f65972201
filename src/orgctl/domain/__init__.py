"""Domain layer — node kinds, error codes, input models, closure algebra.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
