"""
Data access layer.

Design rules:
- The driver calls ONLY ProductService / attempt() from this package.
- Every statement gets its own connection (see connection.SqlClient).
- No env var reads here (config-only).
"""
