"""Service layer — the form session state machine returning ServiceResult.

Services may import from domain and plugins.
They must never import from commands, output, or infrastructure.
"""
