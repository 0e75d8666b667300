"""Pytest configuration shared by unit and integration tests."""

import logfire


# Keep spans local during tests; nothing is exported.
logfire.configure(send_to_logfire=False, console=False)
