"""Folk art marketplace and session booking service."""
