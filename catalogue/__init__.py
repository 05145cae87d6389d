"""catalogue/ -- Book records, search filters and their persistence.

Layer rule: catalogue/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/ or auth/.
"""
