"""
Main application entry point.
HTTP adapter over the normalization engine.
"""
import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ekatra import __version__, response
from ekatra.config import config
from ekatra.health import router as health_router
from ekatra.logger import logger
from ekatra.response import ResponseEnvelope
from ekatra.sdk import sdk
from ekatra.sentry import capture_transformation_error, initialize_sentry

SAMPLE_PRODUCT = {
    "product_id": "SAMPLE-001",
    "title": "Classic Cotton T-Shirt",
    "description": "Soft everyday tee in breathable cotton",
    "currency": "INR",
    "url": "https://shop.example.com/products/classic-cotton-t-shirt",
    "keywords": "t-shirt,cotton,casual",
    "image_urls": "https://cdn.example.com/tee-front.jpg,https://cdn.example.com/tee-back.png",
    "variants": [
        {"variant_name": "M / Blue", "variant_mrp": 999, "variant_selling_price": 799, "variant_quantity": 12},
        {"variant_name": "L / Blue", "variant_mrp": 999, "variant_selling_price": 749, "variant_quantity": 0,
         "discount": "25% OFF"}
    ]
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    logger.info("Starting Ekatra Normalizer")
    config.validate()
    initialize_sentry()

    yield

    logger.info("Shutting down Ekatra Normalizer")


# Create FastAPI app
app = FastAPI(
    title="Ekatra Normalizer API",
    description="Normalizes e-commerce product payloads into the canonical Ekatra shape",
    version=__version__,
    lifespan=lifespan
)
app.include_router(health_router)


def _respond(envelope: ResponseEnvelope) -> JSONResponse:
    status_code = 200 if envelope.is_success else 400
    return JSONResponse(status_code=status_code, content=envelope.to_dict())


async def _read_payload(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        logger.warning(f"Malformed JSON body on {request.url.path}: {e}")
        return None


async def _execute(route: str, operation: Callable[[Any], ResponseEnvelope], payload: Any) -> JSONResponse:
    try:
        envelope = await asyncio.to_thread(operation, payload)
        return _respond(envelope)
    except Exception as e:
        logger.error(f"Unexpected error on {route}: {e}", exc_info=True)
        capture_transformation_error(payload, e, route)
        envelope = response.transformation_error("Internal transformation error")
        return JSONResponse(status_code=500, content=envelope.to_dict())


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Ekatra Normalizer",
        "version": __version__,
        "status": "operational",
        "timestamp": datetime.utcnow().isoformat()
    }


@app.post("/ekatra/transform")
async def transform_flexible(request: Request):
    """Flexible transform of any supported payload shape."""
    payload = await _read_payload(request)
    return await _execute("/ekatra/transform", sdk.transform_flexible, payload)


@app.post("/ekatra/transform/smart")
async def transform_smart(request: Request):
    payload = await _read_payload(request)
    return await _execute("/ekatra/transform/smart", sdk.smart_transform_product, payload)


@app.post("/ekatra/transform/sync")
async def transform_sync(request: Request):
    payload = await _read_payload(request)
    return await _execute("/ekatra/transform/sync", sdk.transform_sync, payload)


@app.post("/ekatra/transform/legacy")
async def transform_legacy(request: Request):
    payload = await _read_payload(request)
    return await _execute("/ekatra/transform/legacy", sdk.transform_product, payload)


@app.post("/ekatra/validate")
async def validate_product(request: Request):
    """Validate without transforming."""
    payload = await _read_payload(request)

    def validate(raw: Any) -> ResponseEnvelope:
        result = sdk.validate(raw)
        status = response.SUCCESS if result.valid else response.ERROR
        message = "Product data is valid" if result.valid else "Product validation failed"
        return sdk.build_envelope(status, None, {"validation": result.to_dict()}, message)

    return await _execute("/ekatra/validate", validate, payload)


if config.TEST_ROUTES_ENABLED:

    @app.get("/ekatra/test/sample")
    async def transform_sample():
        """Flexible transform of a built-in sample payload."""
        return await _execute("/ekatra/test/sample", sdk.transform_flexible, SAMPLE_PRODUCT)


if __name__ == "__main__":
    import os
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
