#!/usr/bin/env python3
"""
curriculum builder

A FastAPI application that turns an uploaded PDF into a structured
curriculum (modules, topics, lessons) using a rule based parser or an
Ollama hosted LLM.

To start the server:
    python main.py
"""

import sys
from pathlib import Path

# add src to python path so the package imports without installing
sys.path.insert(0, str(Path(__file__).parent / "src"))

# start the fastapi server when this file is run
if __name__ == "__main__":
    import uvicorn
    from curriculum_builder.config import get_settings

    settings = get_settings()
    # run the api app with auto-reload for development
    uvicorn.run("curriculum_builder.api:app", host=settings.HOST, port=settings.PORT, reload=True)
