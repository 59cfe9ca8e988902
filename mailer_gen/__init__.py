"""
Pixel-matched HTML Generation from Structured Data and Screenshots

A pipeline that turns uploaded JSON data files and reference screenshots into
a single 600px HTML document using a multi-modal Large Language Model.
"""

__version__ = "0.1.0"
