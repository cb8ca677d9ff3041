#!/usr/bin/env python3
"""
server.py - View rendering backend server

FastAPI-based server that renders component trees from declarative JSON view
templates and a data model posted by the host application.

The server is configuration-driven: each view is a template file under
configs/views/.
"""

import logging
import os
from typing import Any, Optional

from fastapi import Body, FastAPI, HTTPException

from adaptive import __version__
from adaptive.config import ConfigLoader, DataLoader
from adaptive.rendering import TemplateParseError, ViewRenderer

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title="Adaptive View API", version=__version__)

# Initialize components
config_loader = ConfigLoader(os.environ.get("ADAPTIVE_CONFIG_DIR", "configs"))
view_renderer = ViewRenderer(config_loader)


@app.post("/views/{view_name}")
async def render_view(
    view_name: str,
    document: Any = Body(default=None),
    select: Optional[str] = None
):
    """
    Render a view against the posted data model.

    Args:
        view_name: Name of the view template (e.g., "feed")
        document: JSON request body holding the data model
        select: Optional JSONPath picking the data model inside the body

    Returns:
        View data with the rendered component tree
    """
    try:
        if select:
            document = DataLoader.select(document if document is not None else {}, select)
        return view_renderer.render_view(view_name, document)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TemplateParseError as e:
        logger.error("Template for view %s is invalid: %s", view_name, e)
        raise HTTPException(status_code=500, detail=f"Invalid template for view '{view_name}': {e}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Error rendering view %s", view_name)
        raise HTTPException(status_code=500, detail=f"Error rendering view: {str(e)}")


@app.get("/views")
async def list_views():
    """List the available view templates."""
    return {"views": view_renderer.config_loader.list_views()}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
