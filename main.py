from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from routes import router
import uvicorn

from config import PORT
from llm_client import ConfigurationError
from log_utils import logger

# Initialize FastAPI app
app = FastAPI(
    title="Gemini Code Coach API",
    description="Chat, project ideas, coding challenges and simulated code runs backed by Gemini",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # For production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error on {request.url.path}: {str(exc)}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# Include router
app.include_router(router, prefix="/api/v1")


# Root endpoint
@app.get("/")
async def root():
    """
    Root endpoint - provides basic API information
    """
    return {
        "name": "Gemini Code Coach API",
        "version": "1.0.0",
        "status": "online",
        "documentation": "/docs"
    }

if __name__ == "__main__":
    uvicorn.run("main:app", host="127.0.0.1", port=PORT, reload=True)
