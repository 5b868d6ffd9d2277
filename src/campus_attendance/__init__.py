"""Campus Attendance package.

This package is organized by feature modules (users, verification, profiles,
attendance, ...) with a thin Flask controller layer over service/repository
layers.
"""
