"""
Plugin de teste que falha durante o import.
"""

raise ImportError("broken plugin module")
