# src/inference/__init__.py — v1
