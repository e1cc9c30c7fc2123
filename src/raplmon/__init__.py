"""RAPL power monitor.

Discovers power-capping zones, samples their cumulative energy counters
once per second, and reports live power plus running max/min/average until
interrupted.
"""

__version__ = "0.1.0"
