"""Idea Validator: validated startup ideas and their market opportunity heatmap"""

__version__ = "1.0.0"
