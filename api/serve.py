"""Serve the battle API with uvicorn."""
import argparse
import logging
import uvicorn


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the Grid Arena API server.")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port for the API (default: 8000)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    args = parser.parse_args(argv)

    # Configure logging once at startup
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    logging.getLogger("api").info(f"Starting Grid Arena API at http://{args.host}:{args.port}")
    uvicorn.run("api.app:app", host=args.host, port=args.port,
                reload=args.reload, log_level=args.log_level)


if __name__ == "__main__":
    main()
