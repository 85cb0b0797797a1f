"""Beta estimation of an asset's low/high/close prices against a market index."""

__all__ = ["__version__"]

__version__ = "0.1.0"
