"""Typing session domain services: word pool, presets, sampling, masking,
the session engine and scoring.

Everything except ``scheduler`` is free of Flask and Socket.IO so it can be
driven directly from tests or another transport.
"""
