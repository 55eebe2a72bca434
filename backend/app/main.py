import logging

from fastapi import FastAPI

from .db import Base, engine
from . import models  # noqa: F401  registers tables on Base.metadata
from .settings import settings
from .routers import auth
from .routers import lessons
from .routers import profile
from .routers import relay

logging.basicConfig(
	level=settings.log_level.upper(),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Skill Tree Lessons API")
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(lessons.router)
app.include_router(relay.router)


@app.get("/info")
def root():
	return {"status": "ok", "completion_configured": bool(settings.openai_api_key)}


@app.on_event("startup")
async def startup_event():
	# Initialize DB schema
	Base.metadata.create_all(bind=engine)
