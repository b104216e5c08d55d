from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from controllers.studentController import router as student_router, get_store
from config import get_settings
from database import StudentStore
from helpers.exceptions import RegistryError
import logging

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    store = StudentStore.from_settings(settings)
    try:
        await store.connect()
        app.state.store = store
        yield
    finally:
        store.close()

app = FastAPI(
    title="Student Registry API",
    description="API for registering, listing and updating students",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(student_router, tags=["Students"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": "Invalid request body"})

@app.get("/", response_class=PlainTextResponse)
async def welcome():
    return "Welcome to the Student Registry API"

# Test database endpoint
@app.get("/test-database")
async def test_database(store: StudentStore = Depends(get_store)):
    collections = await store.list_collection_names()
    return {"database": store.database.name, "collections": collections}

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    logger.info(f"Server is running on port {settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
