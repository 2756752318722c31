import os

from fastapi.openapi.utils import get_openapi
from dotenv import load_dotenv

# settings are read from the environment when eventbudget is imported
load_dotenv()

from eventbudget.main import app  # noqa: E402

OPENAPI_TAGS = [
    {"name": "pricing", "description": "Price bands per service type and location."},
    {"name": "packages", "description": "Package deals and applying them to events."},
    {"name": "budget", "description": "Breakdowns, adjustments, recommendations and actual spend."},
]


def custom_openapi() -> dict:
    """Return OpenAPI schema with project metadata and the actor header scheme."""
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title="Event Budget API",
        version="1.0.0",
        description="Pricing, package deals and budget breakdowns for event planning.",
        routes=app.routes,
        tags=OPENAPI_TAGS,
    )
    schema.setdefault("components", {})["securitySchemes"] = {
        "ActorHeader": {"type": "apiKey", "in": "header", "name": "X-Actor-Id"},
    }
    app.openapi_schema = schema
    return app.openapi_schema


app.openapi = custom_openapi

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        workers=int(os.getenv("UVICORN_WORKERS", "1")),
        timeout_keep_alive=int(os.getenv("UVICORN_KEEPALIVE", "65")),
    )
