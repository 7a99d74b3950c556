"""auth/ -- Authentication package for the employee directory.

Token codec, credential store, registration/login and the request-time
identity resolver.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/, directory/, or client/.
api/ imports from auth/, not the other way around.
"""
