"""Servicios del Core: orquestación de adaptadores para cada endpoint."""
