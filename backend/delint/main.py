from fastapi import FastAPI
from delint.core.config import settings
from delint.api.routes import webhook
from delint.utils.logger import setup_logging

setup_logging(settings.DEBUG)

app = FastAPI(title=settings.APP_NAME)

@app.get("/")
def root():
    return {"message": "delint - Automatic TypeScript de-linting"}

@app.get("/health")
def health_check():
    return {"status": "healthy"}

# Include routers
app.include_router(webhook.router, prefix="/webhook", tags=["webhook"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("delint.main:app", host="0.0.0.0", port=8000)
