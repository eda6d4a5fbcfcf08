import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.database import Base, engine
from backend.models import lesson, user, vocabulary  # noqa: F401
from backend.routes import (
    analytics_routes,
    auth_routes,
    learner_vocabulary_routes,
    lesson_routes,
    vocabulary_routes,
)

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.exception_handler(RequestValidationError)
async def invalid_payload_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # the rejected input is left out; it may not even be encodable
    issues = [{key: value for key, value in error.items() if key != 'input'} for error in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'detail': 'Invalid payload', 'issues': jsonable_encoder(issues)},
    )


@app.get('/health')
def health():
    return {'status': 'ok'}


app.include_router(auth_routes.router, prefix='/api')
app.include_router(lesson_routes.router, prefix='/api')
app.include_router(vocabulary_routes.router, prefix='/api')
app.include_router(learner_vocabulary_routes.router, prefix='/api')
app.include_router(analytics_routes.router, prefix='/api')
