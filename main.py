"""
ASGI entry point: ``uvicorn main:app`` serves the StayNest API.
"""
from staynest.api.app import create_app
from staynest.api.config import settings

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
