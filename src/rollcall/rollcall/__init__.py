"""Rollcall package.

Attendance desk, event (volunteer) attendance and label printing, organized
by feature modules with a thin Flask controller layer over service and
repository layers.
"""

__version__ = "1.0.0"
