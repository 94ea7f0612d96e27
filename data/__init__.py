"""
Data Package
============
Data managers: persistent reports, per-user menu sessions.
"""
