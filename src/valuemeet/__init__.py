"""ValueMeet - meeting governance and lifecycle engine."""
