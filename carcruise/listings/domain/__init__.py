"""
Booking rules that do not touch the database.

Every function takes its inputs (bookings, prices, the current instant) as
arguments; querying and saving is done by `carcruise.listings.services`.
"""
