"""
ASGI entry point: `uvicorn main:app` from the backend directory.
"""
from docvault.core.logging_config import setup_logging
from docvault.main import create_app

setup_logging()
app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
