"""Capa HTTP (FastAPI): expone los servicios del Core como endpoints JSON."""
