"""Infrastructure layer — terminal-backed collaborators.

This layer depends on stdlib and click. It implements the collaborator
protocols from ``services.collaborators`` and imports nothing else from
services, commands, or output.
"""
