"""auth/ -- Authentication package for ClientDesk.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or crm/.
api/ imports from auth/, not the other way around.
"""
