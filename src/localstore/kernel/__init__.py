"""Kernel layer - filesystem primitives and store opening."""
