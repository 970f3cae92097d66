"""Pure transforms behind the dashboard views.

Every function in this package takes plain input data and returns new
derived data; nothing here performs I/O or keeps state between calls.
"""
