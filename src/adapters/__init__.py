"""Adaptadores de infraestructura.

Por qué:
- TLS (pyOpenSSL), parseo X.509 (cryptography) y ficheros son detalles de I/O.
- El Core solo conoce `TargetAddress`, `GrabConfig` y bytes DER.
"""
