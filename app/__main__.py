"""Run the API with uvicorn: ``python -m app [--host HOST] [--port PORT]``."""

import argparse

if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    parser = argparse.ArgumentParser(description="Serve the rental notary API.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    uvicorn.run("app.main:app", host=args.host, port=args.port)
