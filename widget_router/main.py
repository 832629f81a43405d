# Role: FastAPI app bootstrap. Loads environment config early, registers routers, and exposes health/docs endpoints.

from fastapi import FastAPI

import widget_router.config
widget_router.config.load_env()

from widget_router.api.interactions import router as interactions_router
from widget_router.api.routing import router as routing_router
from widget_router.api.state import router as state_router

app = FastAPI(title="Widget Router API", version="0.1.0")
app.include_router(routing_router)
app.include_router(interactions_router)
app.include_router(state_router)


@app.get("/")
def root() -> dict:
    # Role: quick discoverability for clients (where are docs/health).
    return {
        "message": "Widget Router API is running",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
