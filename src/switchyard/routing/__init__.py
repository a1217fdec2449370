"""Routing — route templates, the ordered route table, reverse resolution.

Routes compile once at construction. The router holds them in an
immutable tuple that is swapped whole on reload.
"""
