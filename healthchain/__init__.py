"""
HealthChain Portal - QR identifier scanning and demo backend lookups.
"""

__version__ = "1.0.0"
