"""
Middleware that binds the current request to the logging context.
"""

from app.core.logging_config import (
    NO_CONTEXT,
    request_method_var,
    request_path_var,
    user_id_var,
)


class RequestContextMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        tokens = [
            (request_method_var, request_method_var.set(scope["method"])),
            (request_path_var, request_path_var.set(scope["path"])),
            # The access guard fills this in once the token is verified
            (user_id_var, user_id_var.set(NO_CONTEXT)),
        ]
        try:
            await self.app(scope, receive, send)
        finally:
            for var, token in reversed(tokens):
                var.reset(token)
