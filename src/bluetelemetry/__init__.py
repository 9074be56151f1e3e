"""
Bluetooth Telemetry

Decoder for the weatronic DV4 and SkyNavigator telemetry streams.
"""

__version__ = "1.0.0"
