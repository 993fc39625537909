"""Guardrails FastAPI application."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aegis_guardrails.api.audit import router as audit_router
from aegis_guardrails.api.evaluations import router as evaluations_router
from aegis_guardrails.api.health import router as health_router
from aegis_guardrails.api.policies import router as policies_router
from aegis_guardrails.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Guardrails - Prompt Policy Evaluation Service",
    description="Evaluates agent prompts against safety policies and keeps an audit trail",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["Health"])
app.include_router(evaluations_router, prefix="/v1", tags=["Guardrails"])
app.include_router(policies_router, prefix="/v1", tags=["Policies"])
app.include_router(audit_router, prefix="/v1", tags=["Audit"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"service": "guardrails", "version": "0.1.0", "docs": "/docs"}
