"""
Read and write paths of the marketplace core.

Views stay thin: every rule about bookings, availability, favorites, reviews
and search lives in these modules and raises the errors from
``staylist.rentals.exceptions``.
"""
