"""
Soil Sensor API
===============

This is the Python package for the ingestion API.

HOW IT'S ORGANIZED:
------------------
- models/    = Data structures (what does a reading / the config look like?)
- services/  = Workers (read the config file, write to the database)
- routers/   = API endpoints (the doors into our app)
- main.py    = Puts it all together and starts the server
"""

__version__ = "1.0.0"
