"""Core: configuración, errores, dominio y servicios (sin detalles de transporte)."""
