"""FastAPI Backend for the Animal Voice Agent

Provides the REST endpoint that turns text into a dog or parrot voice clip,
and the server-rendered voice console that drives it.
"""

import os
import sys
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Form, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from loguru import logger
from pydantic import BaseModel

from console.client import LocalSpeakClient
from console.render import render_console_page
from console.sessions import ConsoleSessions
from console.state import EXAMPLES, VoiceConsole
from voice.config import GatewayConfig
from voice.errors import InternalError, SpeakError
from voice.gateway import SynthesisGateway
from voice.personas import Persona, placeholder_for

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:8000").split(",")
SESSION_COOKIE = "console_session"


# Pydantic models for API
class SpeakRequest(BaseModel):
    """Request model for persona speech synthesis.

    Both fields are optional at the schema level so that a missing text is
    reported as our own 400 rather than a schema error.
    """
    text: Optional[str] = None
    voiceType: Optional[str] = None


class SpeakResponse(BaseModel):
    """Response model for persona speech synthesis."""
    audioUrl: str
    transcript: str
    voiceType: str


class PersonaInfo(BaseModel):
    """Display information for one persona."""
    id: str
    label: str
    icon: str
    traits: List[str]
    placeholder: str


class PersonaCatalogue(BaseModel):
    personas: List[PersonaInfo]
    examples: List[str]


class VoiceInfo(BaseModel):
    """Model for voice information."""
    id: str
    name: str
    language: str
    gender: Optional[str] = ""
    accent: Optional[str] = ""


def create_app(
    gateway: Optional[SynthesisGateway] = None,
    sessions: Optional[ConsoleSessions] = None
) -> FastAPI:
    """Build the application around a gateway and a console session registry."""
    gateway = gateway or SynthesisGateway()
    if sessions is None:
        sessions = ConsoleSessions(lambda: VoiceConsole(LocalSpeakClient(gateway)))

    app = FastAPI(
        title="Animal Voice Agent API",
        description="Dog and parrot voices over ElevenLabs text-to-speech",
        version="1.0.0"
    )
    app.state.gateway = gateway
    app.state.sessions = sessions

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup_event():
        """Report configuration status on startup."""
        config = gateway.config_loader()
        logger.info("Animal Voice Agent API starting...")
        logger.info(f"Model: {config.model_id}, provider: {config.base_url}")
        if not config.api_key:
            logger.warning("ELEVENLABS_API_KEY not set, synthesis requests will fail")
        for persona in Persona:
            if not config.voice_ids.get(persona):
                logger.warning(f"{persona.voice_id_setting} not set, {persona.value} voice unavailable")

    # ========================================================================
    # Error Handlers
    # ========================================================================

    @app.exception_handler(SpeakError)
    async def speak_error_handler(request: Request, exc: SpeakError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
        if request.url.path.startswith("/api/"):
            message = "Request body must be JSON with a text field."
        else:
            message = "Invalid form submission."
        return JSONResponse(status_code=400, content={"error": message})

    # ========================================================================
    # Synthesis Endpoints
    # ========================================================================

    @app.post("/api/speak", response_model=SpeakResponse, tags=["TTS"])
    async def speak(request: SpeakRequest):
        """Generate persona speech from text.

        Returns the audio as a data URL so the browser can play it directly.
        """
        try:
            result = await gateway.speak(request.text, request.voiceType or Persona.DOG)
        except SpeakError:
            raise
        except Exception as e:
            logger.exception(f"Error in /api/speak: {e}")
            raise InternalError() from e

        return SpeakResponse(**result.to_payload())

    @app.get("/api/voices", response_model=List[VoiceInfo], tags=["TTS"])
    async def get_voices():
        """List the voices available to the configured ElevenLabs account."""
        try:
            voices = await gateway.list_voices()
            return [VoiceInfo(**voice) for voice in voices]
        except SpeakError:
            raise
        except Exception as e:
            logger.exception(f"Error in /api/voices: {e}")
            raise InternalError() from e

    @app.get("/api/personas", response_model=PersonaCatalogue, tags=["TTS"])
    async def get_personas():
        """Persona catalogue and example prompts for clients."""
        return PersonaCatalogue(
            personas=[
                PersonaInfo(
                    id=persona.value,
                    label=persona.profile.label,
                    icon=persona.profile.icon,
                    traits=list(persona.profile.traits),
                    placeholder=placeholder_for(persona)
                )
                for persona in Persona
            ],
            examples=list(EXAMPLES)
        )

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint."""
        config: GatewayConfig = gateway.config_loader()
        return {
            "status": "healthy",
            "api_key_configured": bool(config.api_key),
            "voices_configured": {
                persona.value: bool(config.voice_ids.get(persona))
                for persona in Persona
            }
        }

    # ========================================================================
    # Voice Console
    # ========================================================================

    def _redirect_home(session_id: str) -> RedirectResponse:
        response = RedirectResponse("/", status_code=303)
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
        return response

    @app.get("/", response_class=HTMLResponse, tags=["Console"])
    async def console_page(request: Request):
        session_id, console = sessions.get_or_create(request.cookies.get(SESSION_COOKIE))
        response = HTMLResponse(render_console_page(console, error=console.take_error()))
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
        return response

    @app.post("/console/persona", tags=["Console"])
    async def console_select_persona(
        request: Request,
        persona: str = Form(...),
        text: Optional[str] = Form(None)
    ):
        session_id, console = sessions.get_or_create(request.cookies.get(SESSION_COOKIE))
        # Keep whatever was typed but not yet submitted
        if text is not None and not console.is_loading:
            console.set_draft(text)
        try:
            console.select_persona(persona)
        except SpeakError as e:
            console.last_error = e.message
        return _redirect_home(session_id)

    @app.post("/console/example", tags=["Console"])
    async def console_insert_example(request: Request, index: int = Form(...)):
        session_id, console = sessions.get_or_create(request.cookies.get(SESSION_COOKIE))
        if 0 <= index < len(EXAMPLES):
            console.insert_example(index)
        return _redirect_home(session_id)

    @app.post("/console/submit", tags=["Console"])
    async def console_submit(request: Request, text: str = Form("")):
        session_id, console = sessions.get_or_create(request.cookies.get(SESSION_COOKIE))
        # A second post while one is in flight must not touch the draft
        if not console.is_loading:
            console.set_draft(text)
            await console.submit()
        return _redirect_home(session_id)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    log_level = os.getenv("LOG_LEVEL", "info")
    logger.remove()
    logger.add(sys.stderr, level=log_level.upper())

    uvicorn.run(
        "backend.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=log_level
    )
