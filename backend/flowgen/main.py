from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from flowgen import config
from flowgen.api.routes import router
from flowgen.utils.log import configure_logging

configure_logging()

app = FastAPI(
    title="Article to Flowchart",
    version="0.1.0",
)

# Middleware FIRST
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # malformed bodies are caller errors: 400, same payload shape as the routes
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request body",
            "message": "; ".join(str(e.get("msg")) for e in exc.errors()),
            "kind": "validation_error",
        },
    )


# Routes AFTER middleware
app.include_router(router)
