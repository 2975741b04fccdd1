"""
Smart Cutout - 純色背景去背工具
"""

__version__ = "0.1.0"
