"""
Server side of an interactive widget bridge.

Client widgets call back into the server over one GET route; each call carries
a flat parameter bag that is decoded into a typed event and dispatched to a
listener, which answers with partial refresh instructions. Widgets with their
own data source pull rows through read-only data feeds on the same route.
"""

__version__ = "0.3.0"
