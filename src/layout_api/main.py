from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import layout_api.routers.layouts as layouts
from graph_layout import __version__


def create_app() -> FastAPI:
    app = FastAPI(title="Graph Layout API", version=__version__)

    origins = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # API routes
    app.include_router(layouts.router, prefix="/api")

    return app


app = create_app()
