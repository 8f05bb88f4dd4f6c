# src/auth/__init__.py — v1
