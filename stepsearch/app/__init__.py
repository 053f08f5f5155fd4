"""
Presentation side: the pygame viewer and the overlay observer it draws from.
"""
