# src/quota/__init__.py — v1
