"""Attendfy package.

Organised by feature modules (users, attendance, devices, reports, auth)
with a thin Flask controller layer over service/repository layers.
"""

__version__ = "1.0.0"
