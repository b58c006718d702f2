"""Runnable pytraverse examples."""
