"""Simple Graph - In-memory weighted graph library.

A small graph toolkit with:
- Directed and bidirectional weighted graphs
- Adjacency queries
- All-simple-paths enumeration
- Dijkstra shortest paths
"""

__version__ = "0.1.0"
__author__ = "Simple Graph Team"
