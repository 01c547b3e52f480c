"""
Domain models — Pydantic types for kasmctl.

All models are re-exported here for convenient access:

    from kasmctl.core.models import Session, Image, KasmConfig, Formula
"""

from kasmctl.core.models.agent import Agent, UpdateAgentRequest
from kasmctl.core.models.config import Context, KasmConfig, NamedContext
from kasmctl.core.models.formula import Formula, SmokeTest, Variant
from kasmctl.core.models.image import CreateImageParams, Image, UpdateImageRequest
from kasmctl.core.models.resource import Resource
from kasmctl.core.models.server import CreateServerParams, Server, UpdateServerRequest
from kasmctl.core.models.session import CreateSessionResponse, Session, SessionImage
from kasmctl.core.models.zone import Zone

__all__ = [
    # agent.py
    "Agent",
    # config.py
    "Context",
    # image.py
    "CreateImageParams",
    # server.py
    "CreateServerParams",
    # session.py
    "CreateSessionResponse",
    # formula.py
    "Formula",
    "Image",
    "KasmConfig",
    "NamedContext",
    # resource.py
    "Resource",
    "Server",
    "Session",
    "SessionImage",
    "SmokeTest",
    "UpdateAgentRequest",
    "UpdateImageRequest",
    "UpdateServerRequest",
    "Variant",
    # zone.py
    "Zone",
]
