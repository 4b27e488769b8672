"""CineReserva user/auth and movie catalog services."""
