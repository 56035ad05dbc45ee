"""Job bookings export -> revenue, payout and workload metrics."""

__version__ = "0.1.0"
