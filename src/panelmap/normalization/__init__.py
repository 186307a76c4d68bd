"""
Result normalization layer for map panels.

Turns the query result shapes a map panel can receive into one ordered
list of geolocated data values with running value statistics.
"""
