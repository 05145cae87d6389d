"""auth/ -- Authentication and authorization package for the library catalogue.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/ or catalogue/.
api/ imports from auth/, not the other way around.
"""
