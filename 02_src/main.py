"""Main entry point for the RP helpdesk bot."""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from helpdesk.api import create_fastapi_app
from helpdesk.config import resolve_api_address
from helpdesk.logging_config import setup_logging
from sim import Sim


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    api_host, api_port = resolve_api_address(
        os.getenv("API_HOST"), os.getenv("API_PORT")
    )
    api_url = f"http://{api_host}:{api_port}"

    # Create SIM instance
    sim = Sim(api_url=api_url)

    # Set SIM instance for control router
    from helpdesk.api.routes import control
    control.set_sim_instance(sim)

    app = create_fastapi_app()

    uvicorn.run(
        app,
        host=api_host,
        port=api_port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
