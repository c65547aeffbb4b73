"""
Executive Assistant - Main FastAPI Application
Validates chat requests and hands each turn to the dialogue engine.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from datetime import datetime, timezone
import uuid

from .agent.graph import run_turn
from .schemas import ChatRequest, ChatResponse, EXAMPLE_REQUEST
from .utils.config import settings
from .utils.logger import logger

# Initialize FastAPI app
app = FastAPI(
    title="Executive Assistant",
    description="Chat assistant for meeting scheduling and email reply drafting",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.frontend_url,
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Collaborators for the dialogue engine; None uses the default clients
app.state.services = None


def boundary_error(status_code: int, error: str, details=None, headers=None) -> JSONResponse:
    content = {"error": error, "example": EXAMPLE_REQUEST}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "Executive Assistant",
        "version": "1.0.0"
    }

@app.get("/health")
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "components": {
            "api": "operational",
            "completion": "configured" if settings.openai_api_key else "missing api key",
            "calendar": settings.calendar_url,
            "email": settings.email_url
        }
    }


@app.post("/api/assistant-chat")
async def assistant_chat(request: Request):
    """
    Run one conversation turn.

    Request body:
        {
            "message": "string",
            "conversation_state": {} (optional, the "state" from the previous reply),
            "session_id": "string" (optional),
            "authHeader": "Bearer ..." (optional, falls back to the Authorization header)
        }
    """
    content_type = request.headers.get("content-type", "")
    if "application/json" not in content_type.lower():
        logger.warning(f"Rejected request with content type '{content_type}'")
        return boundary_error(415, "Content-Type must be application/json")

    try:
        body = await request.json()
    except ValueError:
        return boundary_error(400, "Request body is not valid JSON")

    if not isinstance(body, dict):
        return boundary_error(400, "Request body must be a JSON object")

    try:
        chat_request = ChatRequest.model_validate(body)
    except ValidationError as e:
        details = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        logger.warning(f"Invalid chat request: {details}")
        return boundary_error(400, "Invalid request: 'message' must be a non-empty string and 'conversation_state' an object", details)

    auth_header = chat_request.authHeader or request.headers.get("authorization")

    try:
        result = await run_turn(
            chat_request.message,
            chat_request.conversation_state,
            session_id=chat_request.session_id,
            auth_header=auth_header,
            services=request.app.state.services,
        )
    except Exception as e:
        request_id = str(uuid.uuid4())
        logger.exception(f"Error in assistant chat endpoint (request {request_id}): {e}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "requestId": request_id,
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        )

    return ChatResponse(**result).model_dump()


@app.api_route("/api/assistant-chat", methods=["GET", "PUT", "PATCH", "DELETE"])
async def assistant_chat_wrong_method(request: Request):
    return boundary_error(405, f"Method {request.method} not allowed, use POST", headers={"Allow": "POST"})


# Application Startup

@app.on_event("startup")
async def startup_event():
    """Log configuration on startup."""
    logger.info("Starting Executive Assistant")
    logger.info(f"Frontend URL: {settings.frontend_url}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Completion model: {settings.completion_model}")

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "assistant.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level="info"
    )
