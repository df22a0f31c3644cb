#!/usr/bin/env python3
"""
Run script for the Boss Roast Booth Backend
"""
import uvicorn

from app.config.settings import settings

if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=settings.debug)
