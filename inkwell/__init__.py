"""Inkwell: a self-hosted blog backend."""
