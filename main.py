from dotenv import load_dotenv

from fastapi import FastAPI

from apis.geo_api import router as geo_router
from apis.page_api import router as page_router
from core.infrastructure.lifecycle import lifespan
from core.infrastructure.request_logging_middleware import RequestLoggingMiddleware
from core.metadata import APP_TITLE, VERSION
from exceptions.handlers import setup_exception_handlers

load_dotenv()

app = FastAPI(title=APP_TITLE, version=VERSION, lifespan=lifespan)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(page_router)
app.include_router(geo_router)


setup_exception_handlers(app)
