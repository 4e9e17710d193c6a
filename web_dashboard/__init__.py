"""Trade journal web app: Flask API, charts and logging."""
