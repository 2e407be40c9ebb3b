"""Irshad admin package.

This package is organized by feature modules (students, batches, attendance, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
