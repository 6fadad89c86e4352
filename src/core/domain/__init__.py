"""Domain models and errors.

Plain data structures (Pydantic v2) and the error taxonomy. The domain knows
nothing about HTTP clients, Kubernetes or the CLI.
"""
