"""
Naman Textiles Storefront - FastAPI entry point.

Run locally:
    uvicorn api.index:app --reload
"""
from storefront.app import create_app

app = create_app()
