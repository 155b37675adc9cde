"""Modelos y reglas del dominio.

Por qué:
- Aquí viven las estructuras de datos puras y estrictas (Pydantic v2) y las
  reglas de archivos compartidas por la API y la CLI.
- El dominio no conoce HTTP, CLI, ni SDKs: solo conceptos del problema.
"""
