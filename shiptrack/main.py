import logging
from collections import defaultdict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from shiptrack.version import VERSION
from shiptrack.api.v1 import routes_auth, routes_shipments
from shiptrack.core.config import settings
from shiptrack.core.errors import ShipTrackError
from shiptrack.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Create instrumentator first
instrumentator = Instrumentator()

app = FastAPI(title='ShipTrack', version=VERSION)

# Instrument the app BEFORE adding routes or middleware
instrumentator.instrument(app).expose(
    app,
    include_in_schema=False,
    endpoint="/metrics",
    should_gzip=True,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.exception_handler(ShipTrackError)
async def shiptrack_error_handler(request: Request, exc: ShipTrackError):
    return JSONResponse(status_code=exc.status_code, content={'message': exc.message}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = defaultdict(list)
    for err in exc.errors():
        # drop the "body"/"query"/"path" prefix
        loc = [str(p) for p in err.get('loc', ())[1:]]
        errors['.'.join(loc) or '_'].append(err.get('msg', 'Invalid value'))
    return JSONResponse(status_code=400, content={'message': 'Validation error', 'errors': dict(errors)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={'message': 'Internal server error'})


@app.get('/health')
def health(): return {'status': 'ok'}

@app.get('/v1/_info')
def info(): return {'service': 'shiptrack', 'version': VERSION}

@app.on_event("startup")
async def startup_event():
    for route in app.routes:
        if hasattr(route, "methods") and hasattr(route, "path"):
            logger.debug("%s %s", sorted(route.methods), route.path)

app.include_router(routes_auth.router, prefix='/api/auth', tags=['auth'])
app.include_router(routes_shipments.router, prefix='/api/shipments', tags=['shipments'])
