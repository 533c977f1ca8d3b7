"""Participation Tracker package.

Tracks student attendance per class year (verified, self-reported and bonus
days, plus small-group meetings). Organized by feature modules (students,
classyears, smallgroups, attendance) with a thin Flask controller layer over
service/repository layers.
"""
