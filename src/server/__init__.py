"""HTTP service exposing chapterpress conversions, imports and exports."""
