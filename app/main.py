from fastapi import FastAPI
from app.db import Base, engine
import app.models  # noqa: F401 ensure models are imported so tables are known
from app.api.routes import router as api_router
from app.utils import logger

# create FastAPI instance
app = FastAPI(title="Listing Service")
app.include_router(api_router)


@app.on_event("startup")
def on_startup_create_tables():
    # Ensure database tables are created on startup
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        # migrations may own the schema; keep serving
        logger.warning("Could not create tables on startup: %s", e)
