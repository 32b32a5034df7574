import uuid
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List

from aws_lambda_powertools import Logger, Tracer
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from rest_api import create_lambda_handler, with_rest, with_validation
from rest_api.handlers.utils.errors import not_found

# Initialize AWS Powertools
logger = Logger(service="users-service")
tracer = Tracer(service="users-service")

USERS: List[Dict[str, str]] = [
    {
        "id": "1",
        "name": "John Doe",
        "email": "john@example.com",
        "createdAt": "2024-01-15T10:30:00Z",
    },
    {
        "id": "2",
        "name": "Jane Smith",
        "email": "jane@example.com",
        "createdAt": "2024-01-16T14:45:00Z",
    },
    {
        "id": "3",
        "name": "Alice Johnson",
        "email": "alice@example.com",
        "createdAt": "2024-01-17T09:15:00Z",
    },
]


class ListUsersQuery(BaseModel):
    """Query string for listing users."""

    model_config = ConfigDict(extra="allow")

    limit: Annotated[int, Field(ge=1, le=100)] = 50
    email: Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True)] | None = None


class CreateUserRequest(BaseModel):
    """Request body for creating a user."""

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
    email: Annotated[str, StringConstraints(strip_whitespace=True)]

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        """Validate email format."""
        import re
        email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
        if not re.match(email_pattern, v):
            raise ValueError("Invalid email format")
        return v.lower()


@tracer.capture_method
def list_users(request, response) -> Dict[str, Any]:
    """List users, optionally filtered by email."""
    limit = request.query["limit"]
    email = request.query.get("email")

    users = [user for user in USERS if email is None or user["email"] == email]
    if email is not None and not users:
        raise not_found(f"User with email '{email}' not found")

    logger.info("Users listed", extra={"user_count": len(users), "limit": limit})

    return {"users": users[:limit], "count": len(users[:limit])}


@tracer.capture_method
def create_user(request, response) -> Dict[str, str]:
    """Create a user from the validated body."""
    user = {
        "id": str(uuid.uuid4()),
        "name": request.body["name"],
        "email": request.body["email"],
        "createdAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }

    logger.info("User created", extra={"user_id": user["id"]})

    response.status(201).set_header("Location", f"/users/{user['id']}")
    return user


app = with_rest({
    "GET": with_validation({"query": ListUsersQuery})(list_users),
    "POST": with_validation({"body": CreateUserRequest})(create_user),
})

lambda_handler = create_lambda_handler(app)
