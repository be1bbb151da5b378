from fastapi import FastAPI

from commerce.api.orders import router as orders_router
from commerce.errors import register_error_handlers
from commerce.logging import configure_logging

app = FastAPI(title="commerce orders API")

configure_logging()
register_error_handlers(app)

app.include_router(orders_router)


@app.get("/health")
def health():
    return {"status": "ok"}
