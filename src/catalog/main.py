import logging
from fastapi import FastAPI
from catalog.config import settings
from catalog.db import init_db
from catalog.api.router import router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title=settings.APP_NAME)
app.include_router(router)

@app.on_event("startup")
async def on_startup():
    await init_db()
