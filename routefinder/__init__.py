"""
Shortest-route planner for the cities and municipalities of Bataan.
"""
