"""Pluggable components."""
