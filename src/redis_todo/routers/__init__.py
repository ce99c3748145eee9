"""HTTP routers for the todo API."""
