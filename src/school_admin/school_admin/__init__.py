"""School admin package.

This package is organized by feature modules (registrations, identity,
profiles, users) with a thin Flask controller layer and service/repository
layers underneath.
"""
