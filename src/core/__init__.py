"""Core de certgrab: dominio, configuración, contratos y pipeline."""
