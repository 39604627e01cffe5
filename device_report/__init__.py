"""
Device health report: data-quality statistics per registered device,
rendered as a tab-separated spreadsheet and optionally mailed.
"""

__version__ = "1.0.0"
