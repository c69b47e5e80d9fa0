"""Pydantic models for outline input and lesson front matter."""
