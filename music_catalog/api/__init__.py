"""HTTP routers for the music catalog."""
