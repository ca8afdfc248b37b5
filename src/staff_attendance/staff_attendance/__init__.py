"""Staff attendance & shift scheduling package.

Organized by feature modules (geofence, shifts, schedules, attendance) with a
thin Flask JSON controller layer over service/repository layers.
"""
