"""Plots of generated star systems."""
