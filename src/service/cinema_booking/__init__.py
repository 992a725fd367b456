"""Seat inventory, reservation ledger and booking coordination for cinema screenings."""
