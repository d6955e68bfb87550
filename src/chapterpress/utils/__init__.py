"""Utility helpers for chapterpress."""
