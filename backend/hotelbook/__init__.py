"""HotelBook: hotel search, reservation and ownership core."""
