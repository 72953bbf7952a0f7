"""
operatinghours - weekly operating hours and time-slot limit engine.
"""

__version__ = "0.1.0"
