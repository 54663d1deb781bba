# This file marks the routers package for API route modules.
# The package groups endpoint modules by concern so app.py can register them in one place.
