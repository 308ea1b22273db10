"""Webpage analyzer command-line interface."""
