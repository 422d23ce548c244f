# Load environment variables from .env file first, before any other imports
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI

from feed_service.api.logging_config import RequestLoggingMiddleware, setup_logging
from feed_service.api.routes import embed, feed
from feed_service.config import get_feed_config
from feed_service.models.response_models import HealthResponse

setup_logging(get_feed_config().log_level)

app = FastAPI(title="Product Discovery Feed Service", version="1.0.0")
app.add_middleware(RequestLoggingMiddleware)

app.include_router(feed.router, prefix="/feed", tags=["feed"])
app.include_router(embed.router, prefix="/embed", tags=["embed"])


@app.get("/health", response_model=HealthResponse)
def health_check():
    return HealthResponse()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
