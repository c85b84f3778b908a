"""Lesson QR attendance package.

Organized by feature modules (tokens, attendance, lessons, students, reports)
with a thin Flask controller layer over service/repository layers.
"""
