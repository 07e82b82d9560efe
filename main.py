import os

import uvicorn

from app.core.config import settings

# Ponto de entrada para o Uvicorn: `python main.py` ou `uvicorn app.main:app`
if __name__ == "__main__":
    host = os.environ.get("API_HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", os.environ.get("API_PORT", 5000)))

    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=settings.ENVIRONMENT == "development",
    )
