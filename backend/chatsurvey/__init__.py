"""Conversational survey service: FastAPI backend."""
