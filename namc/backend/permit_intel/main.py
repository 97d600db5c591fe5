# uvicorn permit_intel.main:app --reload  (run from namc/backend)
from .entrypoints.fastapi_app import create_app

app = create_app()
