from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fanbase.config import settings

def setup_cors(app: FastAPI):
    """Configure CORS for the public site and the admin dashboard"""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.site_url,
            "http://localhost:3000",  # Next dev server
            "http://localhost:5173",  # Vite dev server
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
