"""HTTP front end for the PRD concierge."""
