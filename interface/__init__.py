"""Protocol front-ends: UCI over stdin/stdout and a FastAPI REST service."""
