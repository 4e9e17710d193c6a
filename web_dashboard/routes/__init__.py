"""Flask blueprints for the trade journal API."""
