"""Command-line entry points: generate_lessons and validate_lessons."""
