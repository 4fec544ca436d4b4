"""Capa CLI (Typer + Rich): flags, códigos de salida y consola de diagnóstico."""
