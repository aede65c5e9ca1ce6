"""metadeps: metadata component dependency graphs.

Builds a directed dependency graph from the platform's component
dependency feed and optionally narrows it to the transitive closure
of a set of seed components.
"""

__version__ = "0.3.1"
