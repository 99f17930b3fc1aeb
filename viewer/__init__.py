"""Viewer layer: per-session state, curve selection and logging."""
