"""
safezone - location-safety advisory client.

Determines whether a position is inside an active hazard alert zone,
classifies the severity and surfaces the nearest safe city to route to.
"""

__version__ = "0.1.0"
