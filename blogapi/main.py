import os
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from .routes import router
from .core import init_metrics
from .models import init_models
from .errors import BlogError, StoreError
import logging
from pythonjsonlogger import jsonlogger

# setup structured logging
logger = logging.getLogger('blogapi')
handler = logging.StreamHandler()
formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.setLevel(logging.INFO)

app = FastAPI(title="Blog API", version="0.3.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.include_router(router, prefix="/api")

@app.get('/healthz')
async def healthz():
    return {'status': 'ok'}

@app.exception_handler(BlogError)
async def blog_error_handler(request: Request, exc: BlogError):
    if isinstance(exc, StoreError):
        logger.error({'msg': 'store_error', 'path': request.url.path, 'error': exc.message})
    return JSONResponse(status_code=exc.status_code, content={'detail': exc.message})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # missing or malformed request fields are a plain bad request
    first = (exc.errors() or [{}])[0]
    field = '.'.join(str(p) for p in first.get('loc', ()) if p != 'body')
    message = first.get('msg', 'invalid request')
    if field:
        message = f'{field}: {message}'
    return JSONResponse(status_code=400, content={'detail': message})

@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    # raised outside a session scope, e.g. while opening a connection
    logger.error({'msg': 'store_error', 'path': request.url.path, 'error': exc.__class__.__name__})
    return JSONResponse(status_code=500, content={'detail': 'store failure'})

@app.middleware('http')
async def log_requests(request: Request, call_next):
    logger.info({'msg':'request_start','method':request.method,'path':request.url.path})
    response = await call_next(request)
    logger.info({'msg':'request_end','status': response.status_code})
    return response

@app.on_event("startup")
async def startup():
    if os.getenv('DB_CREATE_ALL', '0') == '1':
        await init_models()
        logger.info({'msg': 'tables_created'})
    # Best-effort init, don't block app from starting if metrics fail
    try:
        init_metrics()
    except Exception as e:
        logger.warning({'msg': 'metrics_init_failed', 'error': str(e)})
