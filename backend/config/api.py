"""
Django Ninja API configuration.
"""

from django.http import HttpRequest
from ninja import NinjaAPI

from apps.accounts.api import router as accounts_router
from apps.core.responses import register_exception_handlers, success_response
from apps.otp.api import router as otp_router

api = NinjaAPI(
    title="Phone OTP Auth API",
    version="1.0.0",
    description="Phone number one-time-passcode login with signed session tokens.",
    openapi_extra={
        "info": {
            "contact": {"name": "API Support"},
        },
        "tags": [
            {
                "name": "auth",
                "description": "OTP login, profile completion and current user",
            },
            {
                "name": "health",
                "description": "Service health and readiness checks",
            },
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {
                    "type": "http",
                    "scheme": "bearer",
                    "bearerFormat": "JWT",
                    "description": "Session token obtained from /auth/verify-otp. Include as: Authorization: Bearer <token>",
                }
            }
        },
    },
)

register_exception_handlers(api)

# Register routers
api.add_router("/auth", otp_router)
api.add_router("/auth", accounts_router)


@api.get("/health", tags=["health"], operation_id="healthCheck", summary="Health check")
def health_check(request: HttpRequest) -> dict:
    """Health check endpoint for load balancer."""
    return success_response({"status": "ok"})
