"""
Coating Quote Package

Quoting engine for a custom powder-coating service.
Validates part and process parameters, then derives a price breakdown
(base price, prep surcharge, rush surcharge, total).
"""

__version__ = "1.0.0"
