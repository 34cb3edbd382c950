from fastapi import Request

from app.core.rate_limit import LoginAttemptStore
from app.db.schema_probe import SchemaProbe


def get_schema_probe(request: Request) -> SchemaProbe:
    """Probe built once at start-up in the app lifespan."""
    return request.app.state.schema_probe


def get_login_attempts(request: Request) -> LoginAttemptStore:
    return request.app.state.login_attempts
