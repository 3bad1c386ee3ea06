"""Meta RPC server: configuration, logging, schemas and the FastAPI app."""
