"""
CareBase platform services.

Hosts the subscription and billing engine used by the care-facility
management application. Storage, presentation, and payment collection live
outside this package and call into it with validated inputs.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
