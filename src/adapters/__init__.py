"""Adaptadores de I/O: backend de análisis, Gemini, GitHub y el propio gateway."""
