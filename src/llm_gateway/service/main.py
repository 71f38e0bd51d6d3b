"""
LLM Gateway Service

A FastAPI service that holds provider credentials on behalf of browser
callers. It accepts one uniform chat request, resolves the provider
adapter and the server-side API key, performs the upstream call and
returns one uniform response.

Endpoints:
- POST /chat (alias /api/llm/chat): uniform chat completion
- POST /functions/v1/llm-gateway: edge-variant envelope of the same call
- GET /health (alias /api/health): gateway liveness, no upstream calls
- OPTIONS *: CORS preflight
"""

import os
import json
import logging
from typing import Optional, Type, TypeVar
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ValidationError
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource
import httpx

from ..core.config import GatewayConfig, load_config
from ..core.errors import GatewayCredentialError, GatewayError, GatewayInvalidRequestError
from ..core.registry import AdapterRegistry, build_registry
from ..models.request import ChatRequest, EdgeChatRequest
from ..models.response import ChatResponse, EdgeChatResponse, HealthReport

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


# Global resources, read-only once initialized
gateway_config: Optional[GatewayConfig] = None
registry: Optional[AdapterRegistry] = None
http_client: Optional[httpx.AsyncClient] = None


def init_gateway(
    config: Optional[GatewayConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> None:
    """
    Install the configuration and adapter registry used by the routes.

    Args:
        config: Gateway configuration, loaded from disk/env if None
        client: Shared upstream HTTP client for all adapters
    """
    global gateway_config, registry
    gateway_config = config or load_config()
    registry = build_registry(gateway_config, client)


def _get_config() -> GatewayConfig:
    if gateway_config is None:
        init_gateway()
    return gateway_config


def _get_registry() -> AdapterRegistry:
    if registry is None:
        init_gateway()
    return registry


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global http_client

    # Setup OpenTelemetry export only when a collector is configured
    otel_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if otel_endpoint:
        resource = Resource.create({"service.name": "llm-gateway"})
        provider = TracerProvider(resource=resource)
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otel_endpoint)))
        trace.set_tracer_provider(provider)

    if registry is None:
        config = load_config()
        http_client = httpx.AsyncClient(timeout=config.upstream_timeout)
        init_gateway(config, http_client)

    logger.info(f"LLM gateway started, providers: {', '.join(_get_config().health_providers)}")
    yield

    # Cleanup
    if http_client is not None:
        await http_client.aclose()
        http_client = None

    logger.info("LLM gateway stopped")


app = FastAPI(
    title="LLM Gateway",
    description="Uniform chat completion gateway with server-held provider credentials",
    version="1.0.0",
    lifespan=lifespan,
)

# Instrument with OpenTelemetry
FastAPIInstrumentor.instrument_app(app)

tracer = trace.get_tracer(__name__)


@app.middleware("http")
async def cors(request: Request, call_next):
    """Answer preflights and put permissive CORS headers on every response."""
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)

    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


async def _read_body(request: Request, model_class: Type[ModelT]) -> ModelT:
    """Decode and validate a JSON request body."""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise GatewayInvalidRequestError(f"Malformed request body: {e}")

    try:
        return model_class.model_validate(payload)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        raise GatewayInvalidRequestError(f"Invalid chat request: {problems}")


async def complete(chat_request: ChatRequest) -> ChatResponse:
    """
    Dispatch one uniform request to its adapter with the server-held key.

    Callers never supply credentials: any ``apiKey`` on the request is
    replaced by the key resolved from the gateway's environment.
    """
    config = _get_config()
    provider = chat_request.provider

    api_key = config.resolve_credential(provider)
    if api_key is None and config.requires_credential(provider):
        raise GatewayCredentialError(f"Missing API key for {provider}", gateway=provider)

    adapter = _get_registry().resolve(provider)

    with tracer.start_as_current_span("gateway.chat") as span:
        span.set_attribute("llm.provider", provider)
        span.set_attribute("llm.model", chat_request.model)
        span.set_attribute("llm.adapter", type(adapter).__name__)
        return await adapter.complete_chat(
            chat_request.model_copy(update={"api_key": api_key})
        )


def _error_response(error: Exception) -> JSONResponse:
    message = error.message if isinstance(error, GatewayError) else str(error)
    return JSONResponse(status_code=500, content={"error": message})


@app.post("/chat")
@app.post("/api/llm/chat")
async def chat(request: Request):
    """Uniform chat completion."""
    try:
        chat_request = await _read_body(request, ChatRequest)
        response = await complete(chat_request)
        return JSONResponse(content=response.to_wire())
    except GatewayError as e:
        logger.error(f"Gateway error: {type(e).__name__}: {e.message}")
        return _error_response(e)
    except Exception as e:
        logger.exception("Unexpected gateway error")
        return _error_response(e)


@app.post("/functions/v1/llm-gateway")
async def edge_chat(request: Request):
    """Chat completion in the edge-variant envelope."""
    try:
        edge_request = await _read_body(request, EdgeChatRequest)
        chat_request = edge_request.to_chat_request()
        response = await complete(chat_request)
        return JSONResponse(
            content=EdgeChatResponse.from_chat_response(
                response, provider=chat_request.provider, model=chat_request.model
            ).to_wire()
        )
    except GatewayError as e:
        logger.error(f"Gateway error: {type(e).__name__}: {e.message}")
        return _error_response(e)
    except Exception as e:
        logger.exception("Unexpected gateway error")
        return _error_response(e)


@app.get("/health")
@app.get("/api/health")
async def health():
    """Gateway liveness only; providers are not contacted."""
    return HealthReport.now(_get_config().health_providers).model_dump()


# Catch-all for any other endpoints
@app.api_route("/{path:path}", methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"])
async def catch_all(path: str):
    return Response(status_code=404)


def main() -> None:
    """Run the gateway with uvicorn."""
    import uvicorn

    config = load_config()
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
