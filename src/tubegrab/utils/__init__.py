"""Shared utility helpers — pure, dependency-free functions."""
