"""
Selal - fish supply chain platform core.

Packages:
- selal: settings, logging, data providers, web app and CLI
- registration: multi-step sign-up wizard with subscription pricing
- fleet: boat records and box-request ordering
"""

__version__ = "0.1.0"
